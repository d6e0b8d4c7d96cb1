"""Domain services."""

from .base import Service
from .identity_resolver import IdentityResolver, placeholder_email
from .provider_client import ProviderClient
from .token_issuer import TokenIssuer

__all__ = [
    "IdentityResolver",
    "ProviderClient",
    "Service",
    "TokenIssuer",
    "placeholder_email",
]
