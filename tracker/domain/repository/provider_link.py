"""Provider link registry interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Optional

from tracker.domain.model.provider_link import ProviderLink
from tracker.domain.model.user import User
from tracker.domain.value import ExternalProfile, ProviderKind, UserId


class ProviderLinkRegistry(ABC):
    """Registry of users and the provider identities bound to them.

    Owns both user and provider link records. Implementations must enforce
    (provider, subject_id) and (user_id, provider) uniqueness at the
    storage layer and re-validate them inside the mutating transaction.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open an atomic unit of work.

        Everything written inside the block is discarded if the block
        raises. Blocks may be nested.
        """
        pass

    @abstractmethod
    async def find_link_by_provider(
        self, provider: ProviderKind, subject_id: str
    ) -> Optional[tuple[User, ProviderLink]]:
        """Find the link for an external identity together with its owner.

        Args:
            provider: Identity provider
            subject_id: Provider-assigned subject id

        Returns:
            (owner, link) if the identity is linked, None otherwise
        """
        pass

    @abstractmethod
    async def find_user_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[User]:
        """Find a user by primary email (case-insensitive).

        Args:
            email: Email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def create_user_with_link(
        self, provider: ProviderKind, profile: ExternalProfile, email: str
    ) -> User:
        """Create a user and its first provider link atomically.

        Args:
            provider: Provider the user signed in with
            profile: Profile reported by the provider
            email: Primary email for the new user (may be a placeholder)

        Returns:
            The created user

        Raises:
            StorageConflictError: If a concurrent request created the same
                identity or email first
        """
        pass

    @abstractmethod
    async def add_link(
        self, user_id: UserId, provider: ProviderKind, profile: ExternalProfile
    ) -> ProviderLink:
        """Attach a provider identity to an existing user.

        Uniqueness is re-checked inside the transaction. If the identity
        or the provider kind is already linked to this user, the existing
        link is returned and nothing is written.

        Args:
            user_id: Owning user
            provider: Identity provider
            profile: Profile reported by the provider

        Returns:
            The new or already existing link

        Raises:
            NotFoundError: If the user does not exist
            ProviderAlreadyLinkedElsewhereError: If another user owns the identity
            StorageConflictError: If a concurrent write could not be reconciled
        """
        pass

    @abstractmethod
    async def remove_link(self, user_id: UserId, provider: ProviderKind) -> None:
        """Detach a provider from a user.

        The remaining-link count is taken inside the same transaction as
        the delete.

        Args:
            user_id: Owning user
            provider: Provider to detach

        Raises:
            NotLinkedError: If the user has no link for the provider
            LastLinkRejectedError: If it is the user's only link
        """
        pass

    @abstractmethod
    async def list_links(self, user_id: UserId) -> list[ProviderLink]:
        """List a user's links, oldest first.

        Args:
            user_id: The user's unique identifier

        Returns:
            List of links (empty for unknown users)
        """
        pass
