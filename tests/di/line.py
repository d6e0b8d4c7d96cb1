"""Mock LINE providers for testing."""

from dishka import Scope, provide

from tracker.adapter.line import LineProviderClient, MockLineProviderClient
from tracker.util.di.infrastructure.line import LineProvider


class MockLineProvider(LineProvider):
    """Mock LINE provider using mock OAuth client."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_line_client(self) -> LineProviderClient:
        """Provide mock LINE client."""
        return MockLineProviderClient()
