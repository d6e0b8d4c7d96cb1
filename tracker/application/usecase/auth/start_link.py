"""Start link use case."""

import logfire
from pydantic import BaseModel

from tracker.application.usecase.base import BaseUseCase
from tracker.application.usecase.provider import select_client
from tracker.domain.error import LinkNotPendingError
from tracker.domain.repository import LinkingSessionStore
from tracker.domain.service import ProviderClient
from tracker.domain.value import BrowserSessionId, ProviderKind


class StartLinkRequest(BaseModel):
    """Start link request."""

    provider: str
    browser_session_id: str | None  # None when the browser sent no cookie


class StartLinkResponse(BaseModel):
    """Start link response."""

    authorization_url: str


class StartLinkUseCase(BaseUseCase[StartLinkRequest, StartLinkResponse]):
    """Use case for redirecting a prepared browser to the provider."""

    def __init__(
        self,
        oauth_clients: dict[ProviderKind, ProviderClient],
        session_store: LinkingSessionStore,
    ) -> None:
        """Initialize start link use case.

        Args:
            oauth_clients: Clients of the enabled providers
            session_store: Linking session store
        """
        self.oauth_clients = oauth_clients
        self.session_store = session_store

    async def execute(self, request: StartLinkRequest) -> StartLinkResponse:
        """Build the authorization URL for a prepared linking session.

        The session is only read here; the callback consumes it.

        Args:
            request: Provider and browser session

        Returns:
            Provider authorization URL carrying the prepared token as state

        Raises:
            ProviderDisabledError: If the provider is unknown or not configured
            LinkNotPendingError: If no live session was prepared for the provider
        """
        client = select_client(request.provider, self.oauth_clients)

        token = None
        if request.browser_session_id:
            token = await self.session_store.pending_token(
                BrowserSessionId(request.browser_session_id), client.provider
            )
        if token is None:
            logfire.warn(
                "Link started without a prepared session",
                provider=client.provider.value,
                has_cookie=request.browser_session_id is not None,
            )
            raise LinkNotPendingError(request.browser_session_id)

        return StartLinkResponse(authorization_url=client.authorization_url(token))
