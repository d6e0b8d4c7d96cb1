"""Authentication routes.

Browser-facing endpoints (start, link, callback) always answer with a
redirect; failures become ``{frontend}/?error=<code>``. JSON endpoints
authenticate with ``Authorization: Bearer <token>``.

Static paths are registered before ``/{provider}`` so that ``/auth/me``
is never read as a provider called "me".
"""

import logging
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from tracker.application.usecase.auth import (
    CompleteLoginUseCase,
    GetCurrentUserUseCase,
    PrepareLinkUseCase,
    StartLinkUseCase,
    StartLoginUseCase,
)
from tracker.application.usecase.auth.complete_login import CompleteLoginRequest
from tracker.application.usecase.auth.get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
)
from tracker.application.usecase.auth.prepare_link import (
    PrepareLinkRequest,
    PrepareLinkResponse,
)
from tracker.application.usecase.auth.start_link import StartLinkRequest
from tracker.application.usecase.auth.start_login import StartLoginRequest
from tracker.config import Settings
from tracker.domain.error import DomainError, NotFoundError, ProviderDisabledError
from tracker.domain.service import TokenIssuer
from tracker.domain.value import ProviderCapabilities
from tracker.interface.api.security import (
    authenticate,
    browser_session_id,
    clear_session_cookie,
    set_session_cookie,
)
from tracker.interface.error import UnauthenticatedError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class CurrentUserResponse(BaseModel):
    """Response envelope for /auth/me."""

    success: bool = True
    data: GetCurrentUserResponse


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool = True


def _frontend_redirect(settings: Settings, **params: str) -> RedirectResponse:
    return RedirectResponse(
        url=f"{settings.api.frontend_url}/?{urlencode(params)}",
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/providers")
async def list_providers(
    capabilities: FromDishka[ProviderCapabilities],
) -> dict[str, bool]:
    """Report which providers can be used for sign-in.

    Example:
        GET /auth/providers

        {"google": true, "line": false}
    """
    return {provider.value: enabled for provider, enabled in capabilities.enabled.items()}


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token_issuer: FromDishka[TokenIssuer],
    authorization: str | None = Header(default=None),
) -> CurrentUserResponse:
    """Get the authenticated user with their linked providers.

    Raises:
        UnauthenticatedError: No valid token, or the user no longer exists
    """
    user_id = authenticate(authorization, token_issuer)
    try:
        user = await get_current_user_use_case.execute(
            GetCurrentUserRequest(user_id=user_id)
        )
    except NotFoundError as e:
        # Valid token for a user that no longer exists
        raise UnauthenticatedError("User not found") from e
    return CurrentUserResponse(data=user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response, settings: FromDishka[Settings]) -> LogoutResponse:
    """Clear the browser session cookie.

    The session token itself is stateless and simply dropped by the client.
    """
    clear_session_cookie(response, settings)
    return LogoutResponse()


@router.get("/{provider}")
async def start_login(
    provider: str,
    start_login_use_case: FromDishka[StartLoginUseCase],
    settings: FromDishka[Settings],
    tracker_session: str | None = Cookie(default=None),
):
    """Send the browser to the provider's consent page for a plain login.

    Example:
        GET /auth/google

        302 Location: https://accounts.google.com/o/oauth2/v2/auth?...&state=...
        Set-Cookie: tracker_session=...
    """
    session_id = browser_session_id(tracker_session)
    logger.info(f"Starting {provider} login")

    result = await start_login_use_case.execute(
        StartLoginRequest(provider=provider, browser_session_id=session_id)
    )

    response = RedirectResponse(
        url=result.authorization_url, status_code=status.HTTP_302_FOUND
    )
    set_session_cookie(response, session_id, settings)
    return response


@router.post("/{provider}/prepare-link", response_model=PrepareLinkResponse)
async def prepare_link(
    provider: str,
    response: Response,
    prepare_link_use_case: FromDishka[PrepareLinkUseCase],
    token_issuer: FromDishka[TokenIssuer],
    settings: FromDishka[Settings],
    authorization: str | None = Header(default=None),
    tracker_session: str | None = Cookie(default=None),
) -> PrepareLinkResponse:
    """Record that the authenticated user wants to attach a provider.

    The frontend calls this with its bearer token, then navigates the
    browser to ``/auth/{provider}/link``.

    Example:
        POST /auth/line/prepare-link
        Authorization: Bearer <token>

        {"ok": true}
    """
    user_id = authenticate(authorization, token_issuer)
    session_id = browser_session_id(tracker_session)

    try:
        result = await prepare_link_use_case.execute(
            PrepareLinkRequest(
                provider=provider, browser_session_id=session_id, user_id=user_id
            )
        )
    except NotFoundError as e:
        raise UnauthenticatedError("User not found") from e

    set_session_cookie(response, session_id, settings)
    logger.info(f"Prepared {provider} link for user {user_id}")
    return result


@router.get("/{provider}/link")
async def start_link(
    provider: str,
    start_link_use_case: FromDishka[StartLinkUseCase],
    settings: FromDishka[Settings],
    tracker_session: str | None = Cookie(default=None),
):
    """Send a prepared browser to the provider's consent page.

    Without a prepared session this redirects to the frontend with
    ``error=state_mismatch``.
    """
    try:
        result = await start_link_use_case.execute(
            StartLinkRequest(provider=provider, browser_session_id=tracker_session)
        )
    except ProviderDisabledError:
        raise
    except DomainError as e:
        logger.warning(f"Cannot start {provider} link: {e.code}")
        return _frontend_redirect(settings, error=e.code)

    return RedirectResponse(
        url=result.authorization_url, status_code=status.HTTP_302_FOUND
    )


@router.get("/{provider}/callback")
async def provider_callback(
    provider: str,
    complete_login_use_case: FromDishka[CompleteLoginUseCase],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    tracker_session: str | None = Cookie(default=None),
):
    """Handle the provider redirect and finish login or linking.

    Example:
        GET /auth/google/callback?code=abc123&state=xyz789

        302 Location: http://localhost:5173/?token=<jwt>
        after a link: http://localhost:5173/?token=<jwt>&linked=google
        on failure:   http://localhost:5173/?error=state_mismatch
    """
    try:
        result = await complete_login_use_case.execute(
            CompleteLoginRequest(
                provider=provider,
                code=code,
                state=state,
                error=error,
                browser_session_id=tracker_session,
            )
        )
    except ProviderDisabledError:
        raise
    except DomainError as e:
        logger.warning(f"{provider} callback failed: {e.code}: {e}")
        return _frontend_redirect(settings, error=e.code)
    except Exception as e:
        logger.exception(f"Unexpected error during {provider} callback: {e}")
        return _frontend_redirect(settings, error="unexpected")

    logger.info(f"{provider} callback completed for user {result.user_id}")

    if result.linked_provider is not None:
        return _frontend_redirect(
            settings, token=result.token, linked=result.linked_provider.value
        )
    return _frontend_redirect(settings, token=result.token)
