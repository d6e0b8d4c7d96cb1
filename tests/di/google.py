"""Mock Google providers for testing."""

from dishka import Scope, provide

from tracker.adapter.google import GoogleProviderClient, MockGoogleProviderClient
from tracker.util.di.infrastructure.google import GoogleProvider


class MockGoogleProvider(GoogleProvider):
    """Mock Google provider using mock OAuth client."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_google_client(self) -> GoogleProviderClient:
        """Provide mock Google client."""
        return MockGoogleProviderClient()
