"""Start login use case."""

import logfire
from pydantic import BaseModel

from tracker.application.usecase.base import BaseUseCase
from tracker.application.usecase.provider import select_client
from tracker.domain.repository import LinkingSessionStore
from tracker.domain.service import ProviderClient
from tracker.domain.value import BrowserSessionId, ProviderKind


class StartLoginRequest(BaseModel):
    """Start login request."""

    provider: str  # Path segment, validated against enabled providers
    browser_session_id: str


class StartLoginResponse(BaseModel):
    """Start login response."""

    authorization_url: str


class StartLoginUseCase(BaseUseCase[StartLoginRequest, StartLoginResponse]):
    """Use case for sending an anonymous browser to a provider's consent page."""

    def __init__(
        self,
        oauth_clients: dict[ProviderKind, ProviderClient],
        session_store: LinkingSessionStore,
    ) -> None:
        """Initialize start login use case.

        Args:
            oauth_clients: Clients of the enabled providers
            session_store: Linking session store
        """
        self.oauth_clients = oauth_clients
        self.session_store = session_store

    async def execute(self, request: StartLoginRequest) -> StartLoginResponse:
        """Begin a plain-login round-trip.

        The pending session has no initiating user, so the callback
        resolves the identity without linking.

        Args:
            request: Provider and browser session

        Returns:
            Provider authorization URL carrying the session token as state

        Raises:
            ProviderDisabledError: If the provider is unknown or not configured
        """
        client = select_client(request.provider, self.oauth_clients)

        with logfire.span("start_login", provider=client.provider.value):
            state = await self.session_store.begin(
                BrowserSessionId(request.browser_session_id),
                initiating_user_id=None,
                provider=client.provider,
            )
            return StartLoginResponse(authorization_url=client.authorization_url(state))
