"""Get current user use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from tracker.application.usecase.account.list_linked_accounts import (
    LinkedAccountSummary,
)
from tracker.application.usecase.base import BaseUseCase
from tracker.domain.service import IdentityResolver
from tracker.domain.value import UserId


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    user_id: str  # From the verified bearer token


class GetCurrentUserResponse(BaseModel):
    """Get current user response."""

    user_id: str
    email: str
    name: str
    avatar_url: str | None
    created_at: datetime
    linked_accounts: list[LinkedAccountSummary]


class GetCurrentUserUseCase(BaseUseCase[GetCurrentUserRequest, GetCurrentUserResponse]):
    """Use case for getting the current authenticated user."""

    def __init__(self, identity_resolver: IdentityResolver) -> None:
        """Initialize get current user use case.

        Args:
            identity_resolver: Identity resolution domain service
        """
        self.identity_resolver = identity_resolver

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Load the user and their linked providers.

        Args:
            request: Request with the authenticated user id

        Returns:
            User information

        Raises:
            NotFoundError: If the user no longer exists
        """
        user = await self.identity_resolver.get_user(UserId(UUID(request.user_id)))
        links = await self.identity_resolver.linked_accounts(user.id)

        return GetCurrentUserResponse(
            user_id=str(user.id),
            email=user.email,
            name=user.name,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            linked_accounts=[LinkedAccountSummary.from_link(link) for link in links],
        )
