"""Unlink account use case."""

from uuid import UUID

from pydantic import BaseModel

from tracker.application.usecase.base import BaseUseCase
from tracker.application.usecase.provider import parse_provider
from tracker.domain.service import IdentityResolver
from tracker.domain.value import UserId


class UnlinkAccountRequest(BaseModel):
    """Unlink account request."""

    user_id: str  # From authenticated user
    provider: str


class UnlinkAccountResponse(BaseModel):
    """Unlink account response."""

    success: bool = True


class UnlinkAccountUseCase(BaseUseCase[UnlinkAccountRequest, UnlinkAccountResponse]):
    """Use case for detaching a provider from the user.

    Works for providers that have since been disabled, so a user can still
    clean up a link they can no longer use.
    """

    def __init__(self, identity_resolver: IdentityResolver) -> None:
        """Initialize unlink account use case.

        Args:
            identity_resolver: Identity resolution domain service
        """
        self.identity_resolver = identity_resolver

    async def execute(self, request: UnlinkAccountRequest) -> UnlinkAccountResponse:
        """Execute unlink flow.

        Args:
            request: Authenticated user and provider name

        Returns:
            Success flag

        Raises:
            ProviderDisabledError: If the provider name is unknown
            NotLinkedError: If the provider is not linked
            LastLinkRejectedError: If it is the user's only sign-in method
        """
        provider = parse_provider(request.provider)
        await self.identity_resolver.unlink(UserId(UUID(request.user_id)), provider)
        return UnlinkAccountResponse()
