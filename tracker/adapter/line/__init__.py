"""LINE identity provider adapter."""

from .client import LineProviderClient, MockLineProviderClient, RealLineProviderClient

__all__ = ["LineProviderClient", "RealLineProviderClient", "MockLineProviderClient"]
