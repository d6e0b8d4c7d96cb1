"""Identity resolution domain service.

Turns a verified provider profile into the canonical user, in this order:

1. Direct match on (provider, subject_id) - the returning user.
2. Linking flow - attach the identity to the user who started the link.
3. Email fallback - attach the identity to the user owning the email.
4. New user - create the user, its first link and the account defaults.

Every mutation runs inside a registry transaction so a user never exists
without a link and a link never points at a missing user.
"""

from typing import Literal, Optional

import logfire

from tracker.domain.error import (
    EmailMergeBlockedError,
    NotFoundError,
    ProviderAlreadyLinkedElsewhereError,
    StorageConflictError,
)
from tracker.domain.model.provider_link import ProviderLink
from tracker.domain.model.user import User
from tracker.domain.repository import AccountSeeder, ProviderLinkRegistry
from tracker.domain.value import ExternalProfile, ProviderKind, UserId

from .base import Service

EmailMergePolicy = Literal["verified", "always"]


def placeholder_email(provider: ProviderKind, subject_id: str) -> str:
    """Synthesize an email for providers that did not disclose one."""
    return f"{subject_id.lower()}@{provider.value}.local"


class IdentityResolver(Service):
    """Domain service deciding which user an external identity belongs to."""

    span_prefix = "identity_resolver"

    def __init__(
        self,
        registry: ProviderLinkRegistry,
        seeder: AccountSeeder,
        email_merge: EmailMergePolicy = "verified",
    ) -> None:
        """Initialize identity resolver.

        Args:
            registry: Provider link registry
            seeder: Account defaults hook for new users
            email_merge: When an email match may attach a new identity
        """
        self.registry = registry
        self.seeder = seeder
        self.email_merge = email_merge

    async def resolve(
        self,
        provider: ProviderKind,
        profile: ExternalProfile,
        pending_link_user_id: Optional[UserId] = None,
    ) -> User:
        """Resolve a provider profile to a user.

        Args:
            provider: Provider that authenticated the profile
            profile: Verified external profile
            pending_link_user_id: User attaching this provider, if the
                callback belongs to an explicit linking flow

        Returns:
            Existing, linked or newly created user

        Raises:
            ProviderAlreadyLinkedElsewhereError: Linking an identity owned
                by another user
            EmailMergeBlockedError: Email belongs to a user but may not be merged
            NotFoundError: The linking user no longer exists
        """
        with self.span(
            "resolve",
            provider=provider.value,
            subject_id=profile.subject_id,
            linking=pending_link_user_id is not None,
        ):
            try:
                return await self._resolve(provider, profile, pending_link_user_id)
            except StorageConflictError as e:
                # A concurrent request committed the same identity first;
                # the second pass finds it through the direct match.
                logfire.warn(
                    "Storage conflict while resolving identity, re-reading",
                    provider=provider.value,
                    subject_id=profile.subject_id,
                    error=str(e),
                )
                return await self._resolve(provider, profile, pending_link_user_id)

    async def _resolve(
        self,
        provider: ProviderKind,
        profile: ExternalProfile,
        pending_link_user_id: Optional[UserId],
    ) -> User:
        match = await self.registry.find_link_by_provider(provider, profile.subject_id)
        if match:
            owner, _ = match
            if pending_link_user_id is not None and owner.id != pending_link_user_id:
                logfire.warn(
                    "Link rejected - identity owned by another user",
                    provider=provider.value,
                    subject_id=profile.subject_id,
                    owner_id=str(owner.id),
                    requested_by=str(pending_link_user_id),
                )
                raise ProviderAlreadyLinkedElsewhereError(provider, profile.subject_id)
            logfire.info(
                "Returning user matched by provider identity",
                user_id=str(owner.id),
                provider=provider.value,
            )
            return owner

        if pending_link_user_id is not None:
            return await self._link_to_user(provider, profile, pending_link_user_id)

        if profile.email:
            existing = await self.registry.find_user_by_email(profile.email)
            if existing:
                return await self._merge_by_email(provider, profile, existing)
        else:
            # A user created from this same identity keeps the synthesized
            # address even after the link itself was removed.
            existing = await self.registry.find_user_by_email(
                placeholder_email(provider, profile.subject_id)
            )
            if existing:
                return await self._attach_new_provider(existing, provider, profile)

        return await self._create_user(provider, profile)

    async def _link_to_user(
        self, provider: ProviderKind, profile: ExternalProfile, user_id: UserId
    ) -> User:
        user = await self.registry.find_user_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))

        links = await self.registry.list_links(user.id)
        if any(link.provider == provider for link in links):
            logfire.info(
                "Provider already linked to user, nothing to do",
                user_id=str(user.id),
                provider=provider.value,
            )
            return user

        return await self._attach(user, provider, profile)

    async def _merge_by_email(
        self, provider: ProviderKind, profile: ExternalProfile, user: User
    ) -> User:
        if self.email_merge == "verified" and not profile.email_verified:
            logfire.warn(
                "Email merge blocked - provider did not verify email",
                provider=provider.value,
                user_id=str(user.id),
            )
            raise EmailMergeBlockedError(
                provider, user.email, f"{provider.value} did not verify it"
            )

        logfire.info(
            "Merging provider identity into user by email",
            provider=provider.value,
            user_id=str(user.id),
        )
        return await self._attach_new_provider(user, provider, profile)

    async def _attach_new_provider(
        self, user: User, provider: ProviderKind, profile: ExternalProfile
    ) -> User:
        links = await self.registry.list_links(user.id)
        if any(link.provider == provider for link in links):
            # A different identity of a provider kind the user already has.
            # It cannot be attached, and signing in with it would bypass
            # the link that exists.
            logfire.warn(
                "Implicit merge blocked - user already has this provider",
                provider=provider.value,
                user_id=str(user.id),
            )
            raise EmailMergeBlockedError(
                provider, user.email, f"user already has a {provider.value} link"
            )
        return await self._attach(user, provider, profile)

    async def _attach(
        self, user: User, provider: ProviderKind, profile: ExternalProfile
    ) -> User:
        async with self.registry.transaction():
            link = await self.registry.add_link(user.id, provider, profile)
        logfire.info(
            "Provider linked to user",
            user_id=str(user.id),
            provider=provider.value,
            link_id=str(link.id),
        )
        return user

    async def _create_user(
        self, provider: ProviderKind, profile: ExternalProfile
    ) -> User:
        email = profile.email or placeholder_email(provider, profile.subject_id)
        async with self.registry.transaction():
            user = await self.registry.create_user_with_link(provider, profile, email)
            await self.seeder.seed_new_user(user.id)
        logfire.info(
            "New user created",
            user_id=str(user.id),
            provider=provider.value,
            placeholder_email=profile.email is None,
        )
        return user

    async def get_user(self, user_id: UserId) -> User:
        """Load a user.

        Args:
            user_id: User ID

        Returns:
            The user

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.registry.find_user_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def linked_accounts(self, user_id: UserId) -> list[ProviderLink]:
        """List the provider links of a user.

        Args:
            user_id: User ID

        Returns:
            Links, oldest first
        """
        with self.span("linked_accounts", user_id=str(user_id)):
            links = await self.registry.list_links(user_id)
            logfire.info(
                "Linked accounts retrieved", user_id=str(user_id), count=len(links)
            )
            return links

    async def unlink(self, user_id: UserId, provider: ProviderKind) -> None:
        """Detach a provider from a user.

        Args:
            user_id: User ID
            provider: Provider to detach

        Raises:
            NotLinkedError: If the provider is not linked
            LastLinkRejectedError: If it is the user's only sign-in method
        """
        with self.span("unlink", user_id=str(user_id), provider=provider.value):
            async with self.registry.transaction():
                await self.registry.remove_link(user_id, provider)
            logfire.info(
                "Provider unlinked", user_id=str(user_id), provider=provider.value
            )
