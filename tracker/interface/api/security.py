"""Request authentication and browser session cookie helpers."""

import secrets
from uuid import UUID

from fastapi import Response

from tracker.config import Settings
from tracker.domain.service import TokenIssuer
from tracker.interface.error import UnauthenticatedError
from tracker.util.jwt import JWTError

SESSION_COOKIE = "tracker_session"


def authenticate(authorization: str | None, token_issuer: TokenIssuer) -> str:
    """Extract the user id from an ``Authorization: Bearer`` header.

    Args:
        authorization: Raw header value
        token_issuer: Session token service

    Returns:
        User id carried by the token

    Raises:
        UnauthenticatedError: If the header is missing or the token is invalid
    """
    if not authorization:
        raise UnauthenticatedError("Not authenticated")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthenticatedError("Expected a bearer token")

    try:
        payload = token_issuer.verify(token)
    except JWTError as e:
        raise UnauthenticatedError(str(e)) from e

    try:
        UUID(payload.user_id)
    except ValueError as e:
        raise UnauthenticatedError("Token carries no valid user id") from e

    return payload.user_id


def browser_session_id(current: str | None) -> str:
    """Reuse the browser session cookie value or mint a new one."""
    return current or secrets.token_urlsafe(32)


def set_session_cookie(response: Response, value: str, settings: Settings) -> None:
    """Attach the browser session cookie to a response.

    Production serves the API and frontend from different sites, which
    requires ``SameSite=None`` and therefore ``Secure``.
    """
    is_production = settings.environment == "production"
    response.set_cookie(
        key=SESSION_COOKIE,
        value=value,
        httponly=True,
        secure=is_production,
        samesite="none" if is_production else "lax",
        path="/",
        max_age=settings.auth.linking_session_ttl_seconds,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Expire the browser session cookie."""
    is_production = settings.environment == "production"
    response.delete_cookie(
        key=SESSION_COOKIE,
        path="/",
        secure=is_production,
        httponly=True,
        samesite="none" if is_production else "lax",
    )
