"""List linked accounts use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from tracker.application.usecase.base import BaseUseCase
from tracker.domain.model import ProviderLink
from tracker.domain.service import IdentityResolver
from tracker.domain.value import ProviderKind, UserId


class LinkedAccountSummary(BaseModel):
    """One provider attached to the user, as shown on the account page."""

    provider: ProviderKind
    email: str | None
    name: str | None
    picture: str | None
    created_at: datetime

    @classmethod
    def from_link(cls, link: ProviderLink) -> "LinkedAccountSummary":
        return cls(
            provider=link.provider,
            email=link.email,
            name=link.name,
            picture=link.avatar_url,
            created_at=link.linked_at,
        )


class ListLinkedAccountsRequest(BaseModel):
    """List linked accounts request."""

    user_id: str  # From authenticated user


class ListLinkedAccountsResponse(BaseModel):
    """List linked accounts response."""

    accounts: list[LinkedAccountSummary]


class ListLinkedAccountsUseCase(
    BaseUseCase[ListLinkedAccountsRequest, ListLinkedAccountsResponse]
):
    """Use case for listing the providers a user can sign in with."""

    def __init__(self, identity_resolver: IdentityResolver) -> None:
        """Initialize list linked accounts use case.

        Args:
            identity_resolver: Identity resolution domain service
        """
        self.identity_resolver = identity_resolver

    async def execute(
        self, request: ListLinkedAccountsRequest
    ) -> ListLinkedAccountsResponse:
        """List the user's links, oldest first."""
        links = await self.identity_resolver.linked_accounts(
            UserId(UUID(request.user_id))
        )
        return ListLinkedAccountsResponse(
            accounts=[LinkedAccountSummary.from_link(link) for link in links]
        )
