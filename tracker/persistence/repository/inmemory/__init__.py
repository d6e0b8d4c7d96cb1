"""In-memory repository implementations for testing."""

from .account_seed import InMemoryAccountSeeder
from .provider_link import InMemoryProviderLinkRegistry

__all__ = [
    "InMemoryAccountSeeder",
    "InMemoryProviderLinkRegistry",
]
