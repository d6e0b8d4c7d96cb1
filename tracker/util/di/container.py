"""Production DI container and its FastAPI wiring."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI
import logfire

from tracker.util.di import PROVIDERS, get_provider


def create_container() -> AsyncContainer:
    """Build the container with every production implementation.

    Nothing is resolved yet: settings, the database engine and the
    provider clients are created on first use.
    """
    providers = [get_provider(base, use_mock=False) for base in PROVIDERS]
    logfire.debug(
        "Building DI container", providers=[p.__name__ for p in providers]
    )
    return make_async_container(*(p() for p in providers), FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app so routes can use ``FromDishka``."""
    setup_dishka(container, app)
