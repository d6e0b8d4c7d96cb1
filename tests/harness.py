"""Test harness for unit, integration and E2E tests.

Integration tests assume PostgreSQL is reachable at DATABASE__URL with
migrations applied (scripts/run_migrations.py).
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from tracker.interface.api.app import create_app
from tracker.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that builds a test container with the given
    unmocking and yields a request-scoped container for service access.

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        unit_env = create_env_fixture()
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_resolve(unit_env):
            resolver = await unit_env.get(IdentityResolver)
            ...
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment


def create_client_fixture(unmock: set[Component] | None = None):
    """Factory for fixtures yielding a TestClient over a fresh test container.

    The client does not follow redirects so tests can inspect them.
    """

    @pytest.fixture
    def _client():
        container = build_test_container(unmock=unmock or set())
        with TestClient(
            create_app(container), follow_redirects=False
        ) as client:
            yield client

    return _client
