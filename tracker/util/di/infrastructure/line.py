"""LINE infrastructure providers."""

from dishka import Scope, provide

from tracker.adapter.line import LineProviderClient, RealLineProviderClient
from tracker.config import Settings
from tracker.util.di.base import ProviderBase


class LineProvider(ProviderBase):
    """LINE component base."""

    __mock_component__ = "line"


class ProdLineProvider(LineProvider):
    """Production LINE provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_line_client(self, settings: Settings) -> LineProviderClient:
        """Provide LINE Login client.

        Returns:
            LINE Login v2.1 client
        """
        return RealLineProviderClient(
            channel_id=settings.auth.line.client_id,
            channel_secret=settings.auth.line.client_secret,
            redirect_uri=settings.auth.line_callback_url,
        )
