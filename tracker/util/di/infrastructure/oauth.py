"""OAuth infrastructure provider for multi-provider authentication."""

from dishka import Scope, provide

from tracker.adapter.google import GoogleProviderClient
from tracker.adapter.line import LineProviderClient
from tracker.domain.service import ProviderClient
from tracker.domain.value import ProviderCapabilities, ProviderKind
from tracker.util.di.base import ProviderBase


class OAuthAggregatorProvider(ProviderBase):
    """Provider that aggregates the enabled provider clients into a dictionary."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_oauth_clients(
        self,
        google_client: GoogleProviderClient,
        line_client: LineProviderClient,
        capabilities: ProviderCapabilities,
    ) -> dict[ProviderKind, ProviderClient]:
        """Provide the clients of enabled providers, keyed by provider.

        Args:
            google_client: Google client (specific type)
            line_client: LINE client (specific type)
            capabilities: Which providers are configured

        Returns:
            Dictionary mapping ProviderKind to ProviderClient
        """
        clients: dict[ProviderKind, ProviderClient] = {
            ProviderKind.GOOGLE: google_client,
            ProviderKind.LINE: line_client,
        }
        return {
            provider: client
            for provider, client in clients.items()
            if capabilities.is_enabled(provider)
        }
