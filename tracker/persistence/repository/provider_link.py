"""PostgreSQL implementation of the provider link registry."""

from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

import logfire
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.domain.error import (
    LastLinkRejectedError,
    NotFoundError,
    NotLinkedError,
    ProviderAlreadyLinkedElsewhereError,
    StorageConflictError,
)
from tracker.domain.model import ProviderLink, User
from tracker.domain.repository import ProviderLinkRegistry
from tracker.domain.value import ExternalProfile, ProviderKind, ProviderLinkId, UserId
from tracker.persistence.mappers import (
    provider_link_to_dict,
    row_to_provider_link,
    row_to_user,
    user_to_dict,
)
from tracker.persistence.tables import provider_links_table, users_table


def new_link(
    user_id: UserId, provider: ProviderKind, profile: ExternalProfile
) -> ProviderLink:
    """Build a link entity from a provider profile."""
    return ProviderLink(
        id=ProviderLinkId(uuid4()),
        user_id=user_id,
        provider=provider,
        subject_id=profile.subject_id,
        email=profile.email,
        name=profile.display_name or None,
        avatar_url=profile.avatar_url,
        linked_at=datetime.now(timezone.utc),
    )


def new_user(email: str, profile: ExternalProfile) -> User:
    """Build a user entity from a provider profile."""
    return User(
        id=UserId(uuid4()),
        email=email.lower(),
        name=profile.display_name or email.split("@")[0],
        avatar_url=profile.avatar_url,
        created_at=datetime.now(timezone.utc),
    )


class PostgresProviderLinkRegistry(ProviderLinkRegistry):
    """PostgreSQL implementation of ProviderLinkRegistry.

    Runs on the request-scoped session. Mutations use SAVEPOINTs so a
    failed operation leaves the surrounding request transaction clean.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize registry with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open a SAVEPOINT on the request transaction."""
        return self.session.begin_nested()

    async def find_link_by_provider(
        self, provider: ProviderKind, subject_id: str
    ) -> Optional[tuple[User, ProviderLink]]:
        """Find the link for an external identity together with its owner.

        Args:
            provider: Identity provider
            subject_id: Provider-assigned subject id

        Returns:
            (owner, link) if linked, None otherwise
        """
        link_stmt = select(provider_links_table).where(
            provider_links_table.c.provider == provider.value,
            provider_links_table.c.subject_id == subject_id,
        )
        result = await self.session.execute(link_stmt)
        link_row = result.mappings().first()
        if not link_row:
            return None

        link = row_to_provider_link(dict(link_row))
        user = await self.find_user_by_id(link.user_id)
        if not user:
            # Foreign key makes this unreachable unless rows are edited by hand
            return None
        return user, link

    async def find_user_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_user_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email.

        Args:
            email: Email to search for

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(
            func.lower(users_table.c.email) == email.strip().lower()
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def create_user_with_link(
        self, provider: ProviderKind, profile: ExternalProfile, email: str
    ) -> User:
        """Insert a user and its first link in one SAVEPOINT.

        Args:
            provider: Provider the user signed in with
            profile: Profile reported by the provider
            email: Primary email for the new user

        Returns:
            The created user

        Raises:
            StorageConflictError: If the identity or email was taken concurrently
        """
        user = new_user(email, profile)
        link = new_link(user.id, provider, profile)

        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    users_table.insert().values(**user_to_dict(user))
                )
                await self.session.execute(
                    provider_links_table.insert().values(**provider_link_to_dict(link))
                )
        except IntegrityError as e:
            logfire.warn(
                "User creation lost a uniqueness race",
                provider=provider.value,
                subject_id=profile.subject_id,
                error=str(e.orig),
            )
            raise StorageConflictError(
                f"{provider.value} identity {profile.subject_id} or email "
                f"{user.email} was created concurrently"
            ) from e

        return user

    async def add_link(
        self, user_id: UserId, provider: ProviderKind, profile: ExternalProfile
    ) -> ProviderLink:
        """Attach a provider identity to an existing user.

        The owning user row is locked for the duration of the SAVEPOINT so
        concurrent link/unlink calls for the same user are serialized.

        Args:
            user_id: Owning user
            provider: Identity provider
            profile: Profile reported by the provider

        Returns:
            The new or already existing link
        """
        async with self.session.begin_nested():
            await self._lock_user(user_id)

            existing = await self._reconcile_existing(user_id, provider, profile)
            if existing:
                return existing

            link = new_link(user_id, provider, profile)
            try:
                async with self.session.begin_nested():
                    await self.session.execute(
                        provider_links_table.insert().values(
                            **provider_link_to_dict(link)
                        )
                    )
            except IntegrityError as e:
                # Another transaction committed between our check and insert
                logfire.warn(
                    "Link insert lost a uniqueness race, re-reading",
                    user_id=str(user_id),
                    provider=provider.value,
                    error=str(e.orig),
                )
                existing = await self._reconcile_existing(user_id, provider, profile)
                if existing:
                    return existing
                raise StorageConflictError(
                    f"Could not link {provider.value} identity {profile.subject_id}"
                ) from e

            return link

    async def remove_link(self, user_id: UserId, provider: ProviderKind) -> None:
        """Detach a provider from a user.

        Args:
            user_id: Owning user
            provider: Provider to detach

        Raises:
            NotLinkedError: If the provider is not linked
            LastLinkRejectedError: If it is the user's only link
        """
        async with self.session.begin_nested():
            await self._lock_user(user_id)

            links = await self.list_links(user_id)
            target = next((link for link in links if link.provider == provider), None)
            if not target:
                raise NotLinkedError(str(user_id), provider)
            if len(links) <= 1:
                raise LastLinkRejectedError(str(user_id), provider)

            await self.session.execute(
                provider_links_table.delete().where(
                    provider_links_table.c.id == target.id
                )
            )

    async def list_links(self, user_id: UserId) -> list[ProviderLink]:
        """Find all links for a user.

        Args:
            user_id: User ID to find links for

        Returns:
            List of links (may be empty)
        """
        stmt = (
            select(provider_links_table)
            .where(provider_links_table.c.user_id == user_id)
            .order_by(provider_links_table.c.linked_at)
        )
        result = await self.session.execute(stmt)
        rows = result.mappings().all()
        return [row_to_provider_link(dict(row)) for row in rows]

    async def _lock_user(self, user_id: UserId) -> None:
        stmt = (
            select(users_table.c.id)
            .where(users_table.c.id == user_id)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            raise NotFoundError("User", str(user_id))

    async def _reconcile_existing(
        self, user_id: UserId, provider: ProviderKind, profile: ExternalProfile
    ) -> Optional[ProviderLink]:
        match = await self.find_link_by_provider(provider, profile.subject_id)
        if match:
            owner, link = match
            if owner.id != user_id:
                raise ProviderAlreadyLinkedElsewhereError(provider, profile.subject_id)
            return link

        stmt = select(provider_links_table).where(
            provider_links_table.c.user_id == user_id,
            provider_links_table.c.provider == provider.value,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_provider_link(dict(row)) if row else None
