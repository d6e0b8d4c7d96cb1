"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from tracker.util.di import PROVIDERS, Component, get_provider


def build_test_container(unmock: set[Component] | None = None) -> AsyncContainer:
    """Build a container where mockable components default to their mocks.

    Settings still come from the environment (see conftest.py), so tests
    that change an AUTH__ variable must do it before building.

    Args:
        unmock: Components to run with their production implementation

    Returns:
        Configured test container

    Raises:
        ValueError: If a component name is not declared by any provider

    Examples:
        # Unit and e2e tests: mock Google, LINE and in-memory storage
        container = build_test_container()

        # Integration tests: real PostgreSQL
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    _validate_unmock(unmock)

    provider_instances = []
    for base in PROVIDERS:
        use_mock = base.is_mockable() and base.__mock_component__ not in unmock
        provider_instances.append(get_provider(base, use_mock=use_mock)())

    return make_async_container(*provider_instances, FastapiProvider())


def _validate_unmock(unmock: set[Component]) -> None:
    known = {
        p.__mock_component__
        for p in PROVIDERS
        if p.is_mockable() and p.__mock_component__
    }
    unknown = unmock - known
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")
