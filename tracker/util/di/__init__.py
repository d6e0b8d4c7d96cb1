"""Dependency injection module."""

from typing import Type

from tracker.util.di.application import ProdApplicationProvider
from tracker.util.di.base import Component, ProviderBase
from tracker.util.di.core import ProdConfigProvider
from tracker.util.di.domain import ProdDomainProvider
from tracker.util.di.infrastructure import (
    GoogleProvider,
    LineProvider,
    LinkingProvider,
    OAuthAggregatorProvider,
    PersistenceProvider,
    ProdGoogleProvider,
    ProdLineProvider,
    ProdPersistenceProvider,
)
from tracker.util.error import DependencyInjectionError

# Single list - all providers treated uniformly
PROVIDERS: list[Type[ProviderBase]] = [
    # Core providers (not mockable)
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    LinkingProvider,
    # Infrastructure components (mockable)
    GoogleProvider,
    LineProvider,
    PersistenceProvider,
    # Combines the enabled provider clients
    OAuthAggregatorProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for a PROVIDERS entry.

    Concrete providers are returned as they are; mockable components
    resolve to their mock or production subclass.

    Args:
        base: Provider base class
        use_mock: Whether to use mock implementation

    Returns:
        Provider class (not instantiated)

    Raises:
        DependencyInjectionError: If requested implementation not found
    """
    if not base.is_mockable():
        return base

    impl = base.implementations().get(use_mock)
    if impl is None:
        component = base.__mock_component__ or base.__name__
        raise DependencyInjectionError(component, use_mock)
    return impl


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    # Core providers
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "LinkingProvider",
    # Infrastructure base classes
    "GoogleProvider",
    "LineProvider",
    "OAuthAggregatorProvider",
    "PersistenceProvider",
    # Infrastructure implementations
    "ProdGoogleProvider",
    "ProdLineProvider",
    "ProdPersistenceProvider",
]
