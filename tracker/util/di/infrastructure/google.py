"""Google infrastructure providers."""

from dishka import Scope, provide

from tracker.adapter.google import GoogleProviderClient, RealGoogleProviderClient
from tracker.config import Settings
from tracker.util.di.base import ProviderBase


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_google_client(self, settings: Settings) -> GoogleProviderClient:
        """Provide Google OAuth client.

        Built even when unconfigured; the capability table keeps a
        disabled provider out of the client registry.

        Returns:
            Google OAuth 2.0 client
        """
        return RealGoogleProviderClient(
            client_id=settings.auth.google.client_id,
            client_secret=settings.auth.google.client_secret,
            redirect_uri=settings.auth.google_callback_url,
        )
