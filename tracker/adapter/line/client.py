"""LINE Login v2.1 client implementation."""

from urllib.parse import urlencode

import httpx
import jwt
import logfire

from tracker.domain.error import ExchangeFailedError
from tracker.domain.service.provider_client import ProviderClient
from tracker.domain.value.types import ExternalProfile, ProviderKind


class LineProviderClient(ProviderClient):
    """Base class for LINE clients.

    Provides type distinction for dependency injection.
    """

    provider = ProviderKind.LINE


class RealLineProviderClient(LineProviderClient):
    """LINE Login authorization-code client.

    The token response carries an HS256 ID token signed with the channel
    secret; its claims are the preferred source of the profile because
    only the ID token carries the email. Without an ID token the profile
    API is used instead.
    """

    authorize_url = "https://access.line.me/oauth2/v2.1/authorize"
    token_url = "https://api.line.me/oauth2/v2.1/token"
    profile_url = "https://api.line.me/v2/profile"
    issuer = "https://access.line.me"

    def __init__(
        self,
        channel_id: str,
        channel_secret: str,
        redirect_uri: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize LINE client.

        Args:
            channel_id: LINE Login channel ID
            channel_secret: LINE Login channel secret
            redirect_uri: Callback URL registered with LINE
            transport: Optional httpx transport (tests)
        """
        self.channel_id = channel_id
        self.channel_secret = channel_secret
        self.redirect_uri = redirect_uri
        self._transport = transport

    def authorization_url(self, state: str) -> str:
        """Build the LINE Login authorization URL.

        Args:
            state: Anti-forgery token

        Returns:
            Authorization URL to redirect user to
        """
        params = {
            "response_type": "code",
            "client_id": self.channel_id,
            "redirect_uri": self.redirect_uri,
            "state": state,
            "scope": "profile openid email",
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange(self, code: str) -> ExternalProfile:
        """Exchange an authorization code for the user's LINE profile.

        Args:
            code: Authorization code from LINE callback

        Returns:
            External profile

        Raises:
            ExchangeFailedError: If any step fails
        """
        with logfire.span("line.exchange"):
            async with httpx.AsyncClient(
                transport=self._transport, timeout=30.0
            ) as client:
                tokens = await self._exchange_code_for_token(client, code)

                id_token = tokens.get("id_token")
                if id_token:
                    profile = self._profile_from_id_token(id_token)
                else:
                    access_token = tokens.get("access_token")
                    if not access_token:
                        raise ExchangeFailedError(
                            self.provider, "token response has no access token"
                        )
                    profile = await self._get_profile(client, access_token)

            logfire.info(
                "LINE exchange completed",
                subject_id=profile.subject_id,
                has_email=profile.email is not None,
            )
            return profile

    async def _exchange_code_for_token(self, client: httpx.AsyncClient, code: str) -> dict:
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.channel_id,
            "client_secret": self.channel_secret,
        }

        try:
            response = await client.post(
                self.token_url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            logfire.error("LINE token exchange HTTP error", error=str(e))
            raise ExchangeFailedError(self.provider, "token endpoint unreachable") from e

        if response.status_code != 200:
            logfire.error(
                "LINE token exchange failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ExchangeFailedError(
                self.provider, f"token endpoint returned {response.status_code}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ExchangeFailedError(self.provider, "malformed token response") from e
        if not isinstance(result, dict):
            raise ExchangeFailedError(self.provider, "malformed token response")
        return result

    def _profile_from_id_token(self, id_token: str) -> ExternalProfile:
        try:
            claims = jwt.decode(
                id_token,
                self.channel_secret,
                algorithms=["HS256"],
                audience=self.channel_id,
                issuer=self.issuer,
            )
        except jwt.InvalidTokenError as e:
            logfire.error("LINE ID token rejected", error=str(e))
            raise ExchangeFailedError(self.provider, "invalid ID token") from e

        subject_id = claims.get("sub")
        if not subject_id:
            raise ExchangeFailedError(self.provider, "ID token has no subject")

        email = claims.get("email")
        return self.build_profile(
            subject_id=subject_id,
            email=email,
            # LINE only releases addresses the user confirmed with LINE
            email_verified=email is not None,
            display_name=claims.get("name") or "",
            avatar_url=claims.get("picture"),
        )

    async def _get_profile(
        self, client: httpx.AsyncClient, access_token: str
    ) -> ExternalProfile:
        try:
            response = await client.get(
                self.profile_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logfire.error("LINE profile HTTP error", error=str(e))
            raise ExchangeFailedError(self.provider, "profile unreachable") from e

        if response.status_code != 200:
            logfire.error(
                "LINE profile request failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ExchangeFailedError(
                self.provider, f"profile returned {response.status_code}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ExchangeFailedError(self.provider, "malformed profile") from e

        subject_id = result.get("userId") if isinstance(result, dict) else None
        if not subject_id:
            raise ExchangeFailedError(self.provider, "profile has no user id")

        return self.build_profile(
            subject_id=subject_id,
            display_name=result.get("displayName") or "",
            avatar_url=result.get("pictureUrl"),
        )


class MockLineProviderClient(LineProviderClient):
    """Mock LINE client for testing.

    ``bob`` yields subject ``line-bob`` with no email, like most LINE
    accounts; a code that is an email address discloses it. Codes starting
    with ``fail`` raise.
    """

    def authorization_url(self, state: str) -> str:
        """Return mock authorization URL."""
        return f"https://access.line.me/oauth2/v2.1/authorize?state={state}&mock=true"

    async def exchange(self, code: str) -> ExternalProfile:
        """Return mock profile derived from the code."""
        if code.startswith("fail"):
            raise ExchangeFailedError(self.provider, "mock rejection")
        local = code.split("@")[0]
        email = code if "@" in code else None
        return ExternalProfile(
            subject_id=f"line-{local}",
            email=email,
            email_verified=email is not None,
            display_name=f"Mock LINE {local}",
            avatar_url="https://example.com/line.png",
        )
