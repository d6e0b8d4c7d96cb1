"""Domain layer DI providers."""

from dishka import Scope, provide

from tracker.config import AuthSettings
from tracker.domain.repository import AccountSeeder, ProviderLinkRegistry
from tracker.domain.service import IdentityResolver, TokenIssuer
from tracker.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_identity_resolver(
        self,
        registry: ProviderLinkRegistry,
        seeder: AccountSeeder,
        auth_settings: AuthSettings,
    ) -> IdentityResolver:
        """Provide identity resolution domain service."""
        return IdentityResolver(
            registry=registry,
            seeder=seeder,
            email_merge=auth_settings.email_merge,
        )

    @provide
    def get_token_issuer(self, auth_settings: AuthSettings) -> TokenIssuer:
        """Provide session token domain service."""
        return TokenIssuer(auth_settings=auth_settings)
