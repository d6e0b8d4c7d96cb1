"""Google identity provider adapter."""

from .client import (
    GoogleProviderClient,
    MockGoogleProviderClient,
    RealGoogleProviderClient,
)

__all__ = ["GoogleProviderClient", "RealGoogleProviderClient", "MockGoogleProviderClient"]
