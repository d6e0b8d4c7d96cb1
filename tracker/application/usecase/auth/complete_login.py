"""Complete login use case."""

import logfire
from pydantic import BaseModel

from tracker.application.usecase.base import BaseUseCase
from tracker.application.usecase.provider import select_client
from tracker.domain.error import (
    AuthorizationDeniedError,
    ExchangeFailedError,
    LinkNotPendingError,
    StateMismatchError,
)
from tracker.domain.repository import LinkingSessionStore
from tracker.domain.service import IdentityResolver, ProviderClient, TokenIssuer
from tracker.domain.value import BrowserSessionId, ProviderKind


class CompleteLoginRequest(BaseModel):
    """Complete login request.

    These parameters come from the provider in the callback URL, plus the
    browser session cookie.
    """

    provider: str
    code: str | None = None  # Authorization code
    state: str | None = None  # Token handed out when the round-trip began
    error: str | None = None  # Set by the provider when consent was refused
    browser_session_id: str | None = None


class CompleteLoginResponse(BaseModel):
    """Complete login response."""

    token: str
    user_id: str
    linked_provider: ProviderKind | None = None  # Set when this was a link flow


class CompleteLoginUseCase(BaseUseCase[CompleteLoginRequest, CompleteLoginResponse]):
    """Use case for finishing a provider round-trip, for login and linking alike."""

    def __init__(
        self,
        oauth_clients: dict[ProviderKind, ProviderClient],
        session_store: LinkingSessionStore,
        identity_resolver: IdentityResolver,
        token_issuer: TokenIssuer,
    ) -> None:
        """Initialize complete login use case.

        Args:
            oauth_clients: Clients of the enabled providers
            session_store: Linking session store
            identity_resolver: Identity resolution domain service
            token_issuer: Session token domain service
        """
        self.oauth_clients = oauth_clients
        self.session_store = session_store
        self.identity_resolver = identity_resolver
        self.token_issuer = token_issuer

    async def execute(self, request: CompleteLoginRequest) -> CompleteLoginResponse:
        """Execute the callback flow.

        Steps:
        1. Consume the pending session; the state must match its token
           (also when the provider reports a refusal)
        2. Exchange the code for a verified profile
        3. Resolve the profile to a user, linking if the session says so
        4. Issue a session token

        Args:
            request: Callback parameters

        Returns:
            Session token and the resolved user

        Raises:
            ProviderDisabledError: Provider unknown or not configured
            AuthorizationDeniedError: The user refused consent
            StateMismatchError: No pending session, or state/provider mismatch
            ExchangeFailedError: Provider rejected the code
            ProviderAlreadyLinkedElsewhereError: Identity owned by another user
            EmailMergeBlockedError: Email owned by another user, merge not allowed
        """
        client = select_client(request.provider, self.oauth_clients)
        provider = client.provider

        if not request.browser_session_id:
            logfire.warn("Callback without a browser session", provider=provider.value)
            raise LinkNotPendingError(None)

        with logfire.span("complete_login", provider=provider.value) as span:
            try:
                initiating_user_id = await self.session_store.consume(
                    BrowserSessionId(request.browser_session_id),
                    request.state or "",
                    provider,
                )
            except StateMismatchError as e:
                logfire.warn(
                    "Callback state rejected",
                    provider=provider.value,
                    reason=type(e).__name__,
                )
                raise
            span.set_attribute("linking", initiating_user_id is not None)

            # Checked after consume so a refused round-trip cannot be replayed
            if request.error:
                raise AuthorizationDeniedError(provider, request.error)

            if not request.code:
                raise ExchangeFailedError(provider, "callback has no code")

            profile = await client.exchange(request.code)

            logfire.info(
                "Provider exchange completed",
                provider=provider.value,
                subject_id=profile.subject_id,
                has_email=profile.email is not None,
            )

            user = await self.identity_resolver.resolve(
                provider, profile, pending_link_user_id=initiating_user_id
            )
            token = self.token_issuer.issue(user)

            return CompleteLoginResponse(
                token=token,
                user_id=str(user.id),
                linked_provider=provider if initiating_user_id is not None else None,
            )
