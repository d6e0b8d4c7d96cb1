"""Google OAuth 2.0 / OpenID Connect client implementation."""

from urllib.parse import urlencode

import httpx
import logfire

from tracker.domain.error import ExchangeFailedError
from tracker.domain.service.provider_client import ProviderClient
from tracker.domain.value.types import ExternalProfile, ProviderKind


class GoogleProviderClient(ProviderClient):
    """Base class for Google clients.

    Provides type distinction for dependency injection.
    """

    provider = ProviderKind.GOOGLE


class RealGoogleProviderClient(GoogleProviderClient):
    """Google authorization-code client.

    Exchanges the code at the token endpoint and reads the OpenID
    userinfo endpoint with the resulting access token.
    """

    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    user_info_url = "https://openidconnect.googleapis.com/v1/userinfo"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Google client.

        Args:
            client_id: Google OAuth client ID
            client_secret: Google OAuth client secret
            redirect_uri: Callback URL registered with Google
            transport: Optional httpx transport (tests)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._transport = transport

    def authorization_url(self, state: str) -> str:
        """Build the Google consent screen URL.

        Args:
            state: Anti-forgery token

        Returns:
            Authorization URL to redirect user to
        """
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": "openid email profile",
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange(self, code: str) -> ExternalProfile:
        """Exchange an authorization code for the user's Google profile.

        Args:
            code: Authorization code from Google callback

        Returns:
            External profile

        Raises:
            ExchangeFailedError: If any step fails
        """
        with logfire.span("google.exchange"):
            async with httpx.AsyncClient(
                transport=self._transport, timeout=30.0
            ) as client:
                access_token = await self._exchange_code_for_token(client, code)
                user_info = await self._get_user_info(client, access_token)

            subject_id = user_info.get("sub")
            if not subject_id:
                raise ExchangeFailedError(self.provider, "userinfo has no subject")

            logfire.info("Google exchange completed", subject_id=subject_id)

            return self.build_profile(
                subject_id=str(subject_id),
                email=user_info.get("email"),
                email_verified=bool(user_info.get("email_verified", False)),
                display_name=user_info.get("name") or "",
                avatar_url=user_info.get("picture"),
            )

    async def _exchange_code_for_token(self, client: httpx.AsyncClient, code: str) -> str:
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
        }

        try:
            response = await client.post(
                self.token_url,
                data=data,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logfire.error("Google token exchange HTTP error", error=str(e))
            raise ExchangeFailedError(self.provider, "token endpoint unreachable") from e

        if response.status_code != 200:
            logfire.error(
                "Google token exchange failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ExchangeFailedError(
                self.provider, f"token endpoint returned {response.status_code}"
            )

        try:
            return response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise ExchangeFailedError(self.provider, "malformed token response") from e

    async def _get_user_info(self, client: httpx.AsyncClient, access_token: str) -> dict:
        try:
            response = await client.get(
                self.user_info_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logfire.error("Google userinfo HTTP error", error=str(e))
            raise ExchangeFailedError(self.provider, "userinfo unreachable") from e

        if response.status_code != 200:
            logfire.error(
                "Google userinfo request failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ExchangeFailedError(
                self.provider, f"userinfo returned {response.status_code}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ExchangeFailedError(self.provider, "malformed userinfo") from e
        if not isinstance(result, dict):
            raise ExchangeFailedError(self.provider, "malformed userinfo")
        return result


class MockGoogleProviderClient(GoogleProviderClient):
    """Mock Google client for testing.

    The profile is derived from the authorization code: ``alice`` yields
    subject ``google-alice`` with ``alice@example.com``; a code that is an
    email address uses it verbatim. Codes starting with ``fail`` raise.
    """

    def authorization_url(self, state: str) -> str:
        """Return mock authorization URL."""
        return f"https://accounts.google.com/o/oauth2/v2/auth?state={state}&mock=true"

    async def exchange(self, code: str) -> ExternalProfile:
        """Return mock profile derived from the code."""
        if code.startswith("fail"):
            raise ExchangeFailedError(self.provider, "mock rejection")
        local = code.split("@")[0]
        return ExternalProfile(
            subject_id=f"google-{local}",
            email=code if "@" in code else f"{code}@example.com",
            email_verified=True,
            display_name=f"Mock Google {local}",
            avatar_url="https://example.com/google.png",
        )
