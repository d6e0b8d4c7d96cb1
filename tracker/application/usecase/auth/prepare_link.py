"""Prepare link use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from tracker.application.usecase.base import BaseUseCase
from tracker.application.usecase.provider import select_client
from tracker.domain.repository import LinkingSessionStore
from tracker.domain.service import IdentityResolver, ProviderClient
from tracker.domain.value import BrowserSessionId, ProviderKind, UserId


class PrepareLinkRequest(BaseModel):
    """Prepare link request."""

    provider: str
    browser_session_id: str
    user_id: str  # From the verified bearer token


class PrepareLinkResponse(BaseModel):
    """Prepare link response."""

    ok: bool = True


class PrepareLinkUseCase(BaseUseCase[PrepareLinkRequest, PrepareLinkResponse]):
    """Use case for recording that an authenticated user wants another provider.

    The frontend calls this with its bearer token before navigating the
    browser to the link endpoint, which cannot carry the token itself.
    """

    def __init__(
        self,
        oauth_clients: dict[ProviderKind, ProviderClient],
        session_store: LinkingSessionStore,
        identity_resolver: IdentityResolver,
    ) -> None:
        """Initialize prepare link use case.

        Args:
            oauth_clients: Clients of the enabled providers
            session_store: Linking session store
            identity_resolver: Identity resolver (user lookups)
        """
        self.oauth_clients = oauth_clients
        self.session_store = session_store
        self.identity_resolver = identity_resolver

    async def execute(self, request: PrepareLinkRequest) -> PrepareLinkResponse:
        """Begin a linking round-trip for the user.

        Args:
            request: Provider, browser session and authenticated user

        Returns:
            Acknowledgement

        Raises:
            ProviderDisabledError: If the provider is unknown or not configured
            NotFoundError: If the user no longer exists
        """
        client = select_client(request.provider, self.oauth_clients)
        user = await self.identity_resolver.get_user(UserId(UUID(request.user_id)))

        with logfire.span(
            "prepare_link", provider=client.provider.value, user_id=str(user.id)
        ):
            await self.session_store.begin(
                BrowserSessionId(request.browser_session_id),
                initiating_user_id=user.id,
                provider=client.provider,
            )
            return PrepareLinkResponse()
