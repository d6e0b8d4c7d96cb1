"""Session token domain service."""

import logfire

from tracker.config import AuthSettings
from tracker.domain.model.user import User
from tracker.util.jwt import TokenPayload, create_token, verify_token

from .base import Service


class TokenIssuer(Service):
    """Mints and verifies the application's own signed session token."""

    span_prefix = "token_issuer"

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize token issuer.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def issue(self, user: User) -> str:
        """Create a session token for the user.

        Args:
            user: Authenticated user

        Returns:
            JWT token string
        """
        with self.span("issue", user_id=str(user.id)):
            token = create_token(
                user_id=str(user.id),
                email=user.email,
                name=user.name,
                settings=self.auth_settings,
            )
            logfire.info("Session token issued", user_id=str(user.id))
            return token

    def verify(self, token: str) -> TokenPayload:
        """Verify a session token and extract its payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with self.span("verify"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.debug("Session token verified", user_id=payload.user_id)
                return payload
            except Exception as e:
                logfire.warn("Session token verification failed", error=str(e))
                raise
