"""Linked account routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header
from pydantic import BaseModel

from tracker.application.usecase.account import (
    ListLinkedAccountsUseCase,
    UnlinkAccountUseCase,
)
from tracker.application.usecase.account.list_linked_accounts import (
    LinkedAccountSummary,
    ListLinkedAccountsRequest,
)
from tracker.application.usecase.account.unlink_account import (
    UnlinkAccountRequest,
    UnlinkAccountResponse,
)
from tracker.domain.service import TokenIssuer
from tracker.interface.api.security import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth/linked-accounts", tags=["accounts"], route_class=DishkaRoute
)


class LinkedAccountsResponse(BaseModel):
    """Response envelope for the linked account list."""

    success: bool = True
    data: list[LinkedAccountSummary]


@router.get("", response_model=LinkedAccountsResponse)
async def list_linked_accounts(
    list_linked_accounts_use_case: FromDishka[ListLinkedAccountsUseCase],
    token_issuer: FromDishka[TokenIssuer],
    authorization: str | None = Header(default=None),
) -> LinkedAccountsResponse:
    """List the providers the user can sign in with.

    Example:
        GET /auth/linked-accounts
        Authorization: Bearer <token>

        {"success": true, "data": [{"provider": "google", "email": "a@x.com", ...}]}
    """
    user_id = authenticate(authorization, token_issuer)
    result = await list_linked_accounts_use_case.execute(
        ListLinkedAccountsRequest(user_id=user_id)
    )
    return LinkedAccountsResponse(data=result.accounts)


@router.delete("/{provider}", response_model=UnlinkAccountResponse)
async def unlink_account(
    provider: str,
    unlink_account_use_case: FromDishka[UnlinkAccountUseCase],
    token_issuer: FromDishka[TokenIssuer],
    authorization: str | None = Header(default=None),
) -> UnlinkAccountResponse:
    """Detach a provider from the user.

    Responds 400 ``last_link`` for the only remaining provider and 404
    ``not_linked`` for a provider that is not attached.
    """
    user_id = authenticate(authorization, token_issuer)
    result = await unlink_account_use_case.execute(
        UnlinkAccountRequest(user_id=user_id, provider=provider)
    )
    logger.info(f"User {user_id} unlinked {provider}")
    return result
