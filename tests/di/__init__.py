"""Mock providers for testing."""

from .google import MockGoogleProvider
from .line import MockLineProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockGoogleProvider",
    "MockLineProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
