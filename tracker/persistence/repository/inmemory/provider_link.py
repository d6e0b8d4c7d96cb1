"""In-memory provider link registry for testing."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from tracker.domain.error import (
    LastLinkRejectedError,
    NotFoundError,
    NotLinkedError,
    ProviderAlreadyLinkedElsewhereError,
    StorageConflictError,
)
from tracker.domain.model import ProviderLink, User
from tracker.domain.repository import ProviderLinkRegistry
from tracker.domain.value import ExternalProfile, ProviderKind, UserId
from tracker.persistence.repository.provider_link import new_link, new_user


class InMemoryProviderLinkRegistry(ProviderLinkRegistry):
    """In-memory implementation of ProviderLinkRegistry for testing.

    Each method body runs without awaiting, so on a single event loop the
    check and the write of one call cannot interleave with another call.
    transaction() snapshots state and restores it if the block raises.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}
        self._links: list[ProviderLink] = []

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Roll back writes made inside the block if it raises."""
        users = dict(self._users)
        links = list(self._links)
        try:
            yield
        except BaseException:
            self._users = users
            self._links = links
            raise

    async def find_link_by_provider(
        self, provider: ProviderKind, subject_id: str
    ) -> Optional[tuple[User, ProviderLink]]:
        """Find the link for an external identity together with its owner."""
        link = self._find_link(provider, subject_id)
        if not link:
            return None
        user = self._users.get(link.user_id)
        return (user, link) if user else None

    async def find_user_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_user_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        email = email.strip().lower()
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def create_user_with_link(
        self, provider: ProviderKind, profile: ExternalProfile, email: str
    ) -> User:
        """Create a user and its first link."""
        user = new_user(email, profile)
        if self._find_link(provider, profile.subject_id) or any(
            u.email == user.email for u in self._users.values()
        ):
            raise StorageConflictError(
                f"{provider.value} identity {profile.subject_id} or email "
                f"{user.email} already exists"
            )

        self._users[user.id] = user
        self._links.append(new_link(user.id, provider, profile))
        return user

    async def add_link(
        self, user_id: UserId, provider: ProviderKind, profile: ExternalProfile
    ) -> ProviderLink:
        """Attach a provider identity, returning an existing link if present."""
        if user_id not in self._users:
            raise NotFoundError("User", str(user_id))

        existing = self._find_link(provider, profile.subject_id)
        if existing:
            if existing.user_id != user_id:
                raise ProviderAlreadyLinkedElsewhereError(provider, profile.subject_id)
            return existing

        for link in self._links:
            if link.user_id == user_id and link.provider == provider:
                return link

        link = new_link(user_id, provider, profile)
        self._links.append(link)
        return link

    async def remove_link(self, user_id: UserId, provider: ProviderKind) -> None:
        """Detach a provider unless it is the user's last link."""
        links = [link for link in self._links if link.user_id == user_id]
        target = next((link for link in links if link.provider == provider), None)
        if not target:
            raise NotLinkedError(str(user_id), provider)
        if len(links) <= 1:
            raise LastLinkRejectedError(str(user_id), provider)
        self._links = [link for link in self._links if link.id != target.id]

    async def list_links(self, user_id: UserId) -> list[ProviderLink]:
        """Find all links for a user, oldest first."""
        matches = [link for link in self._links if link.user_id == user_id]
        matches.sort(key=lambda link: link.linked_at)
        return matches

    def _find_link(
        self, provider: ProviderKind, subject_id: str
    ) -> Optional[ProviderLink]:
        for link in self._links:
            if link.provider == provider and link.subject_id == subject_id:
                return link
        return None
