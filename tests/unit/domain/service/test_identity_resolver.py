"""Unit tests for IdentityResolver."""

from uuid import uuid4

import pytest

from tracker.domain.error import (
    EmailMergeBlockedError,
    LastLinkRejectedError,
    NotFoundError,
    NotLinkedError,
    ProviderAlreadyLinkedElsewhereError,
    StorageConflictError,
)
from tracker.domain.repository import AccountSeeder
from tracker.domain.service import IdentityResolver, placeholder_email
from tracker.domain.value import ExternalProfile, ProviderKind, UserId
from tracker.domain.value.defaults import DEFAULT_CATEGORIES
from tracker.persistence.repository.inmemory import (
    InMemoryAccountSeeder,
    InMemoryProviderLinkRegistry,
)

GOOGLE = ProviderKind.GOOGLE
LINE = ProviderKind.LINE


def google_profile(subject_id: str, email: str | None, verified: bool = True):
    return ExternalProfile(
        subject_id=subject_id,
        email=email,
        email_verified=verified,
        display_name=f"Google {subject_id}",
    )


def line_profile(subject_id: str, email: str | None = None):
    return ExternalProfile(
        subject_id=subject_id,
        email=email,
        email_verified=email is not None,
        display_name=f"LINE {subject_id}",
    )


class FailingSeeder(AccountSeeder):
    """Seeder that fails after the user and link were written."""

    async def seed_new_user(self, user_id: UserId) -> None:
        raise RuntimeError("seeding failed")


class TestIdentityResolver:
    """Tests for IdentityResolver."""

    @pytest.fixture
    def registry(self):
        return InMemoryProviderLinkRegistry()

    @pytest.fixture
    def seeder(self):
        return InMemoryAccountSeeder()

    @pytest.fixture
    def resolver(self, registry, seeder):
        return IdentityResolver(registry=registry, seeder=seeder)


class TestNewUsers(TestIdentityResolver):
    """Tests for first sign-in."""

    @pytest.mark.asyncio
    async def test_creates_user_with_single_link(self, resolver, registry):
        """First Google sign-in creates a user with exactly one link."""
        # Act
        user = await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))

        # Assert
        assert user.email == "a@x.com"
        assert user.name == "Google g1"
        links = await registry.list_links(user.id)
        assert [(link.provider, link.subject_id) for link in links] == [
            (GOOGLE, "g1")
        ]

    @pytest.mark.asyncio
    async def test_same_profile_again_returns_same_user(self, resolver, registry):
        """Second sign-in with the same identity is a direct match."""
        # Arrange
        first = await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))

        # Act
        second = await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))

        # Assert
        assert second == first
        assert len(await registry.list_links(first.id)) == 1

    @pytest.mark.asyncio
    async def test_new_user_is_seeded_with_defaults(self, resolver, seeder):
        """Account defaults are written for new users only."""
        # Act
        user = await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))
        await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))

        # Assert
        assert seeder.categories[user.id] == list(DEFAULT_CATEGORIES)
        assert user.id in seeder.prompts
        assert len(seeder.categories) == 1

    @pytest.mark.asyncio
    async def test_missing_email_gets_placeholder(self, resolver):
        """LINE users without a disclosed email get a synthesized address."""
        # Act
        user = await resolver.resolve(LINE, line_profile("U1234ABC"))

        # Assert
        assert user.email == "u1234abc@line.local"
        assert user.email == placeholder_email(LINE, "U1234ABC")

    @pytest.mark.asyncio
    async def test_creation_is_atomic_when_seeding_fails(self, registry):
        """A failure after the user insert leaves neither user nor link behind."""
        # Arrange
        resolver = IdentityResolver(registry=registry, seeder=FailingSeeder())

        # Act
        with pytest.raises(RuntimeError):
            await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))

        # Assert
        assert await registry.find_link_by_provider(GOOGLE, "g1") is None
        assert await registry.find_user_by_email("a@x.com") is None


class TestEmailMerge(TestIdentityResolver):
    """Tests for the email fallback."""

    @pytest.mark.asyncio
    async def test_verified_email_attaches_to_existing_user(self, resolver, registry):
        """A verified email match attaches the new provider to the owner."""
        # Arrange
        existing = await resolver.resolve(LINE, line_profile("l2", "b@x.com"))

        # Act
        user = await resolver.resolve(GOOGLE, google_profile("g2", "b@x.com"))

        # Assert
        assert user.id == existing.id
        links = await registry.list_links(existing.id)
        assert {link.provider for link in links} == {LINE, GOOGLE}

    @pytest.mark.asyncio
    async def test_email_match_is_case_insensitive(self, resolver):
        """Emails are compared lower-cased."""
        # Arrange
        existing = await resolver.resolve(LINE, line_profile("l2", "B@X.com"))

        # Act
        user = await resolver.resolve(GOOGLE, google_profile("g2", "b@x.COM"))

        # Assert
        assert user.id == existing.id

    @pytest.mark.asyncio
    async def test_unverified_email_is_blocked(self, resolver, registry):
        """Without provider verification the merge is refused and nothing is written."""
        # Arrange
        existing = await resolver.resolve(LINE, line_profile("l2", "b@x.com"))

        # Act
        with pytest.raises(EmailMergeBlockedError) as exc_info:
            await resolver.resolve(
                GOOGLE, google_profile("g2", "b@x.com", verified=False)
            )

        # Assert
        assert "google did not verify it" in str(exc_info.value)
        assert exc_info.value.code == "email_in_use"
        assert len(await registry.list_links(existing.id)) == 1
        assert await registry.find_link_by_provider(GOOGLE, "g2") is None

    @pytest.mark.asyncio
    async def test_always_policy_merges_unverified_email(self, registry, seeder):
        """The permissive policy merges on any email match."""
        # Arrange
        resolver = IdentityResolver(
            registry=registry, seeder=seeder, email_merge="always"
        )
        existing = await resolver.resolve(LINE, line_profile("l2", "b@x.com"))

        # Act
        user = await resolver.resolve(
            GOOGLE, google_profile("g2", "b@x.com", verified=False)
        )

        # Assert
        assert user.id == existing.id

    @pytest.mark.asyncio
    async def test_second_identity_of_same_provider_is_blocked(
        self, resolver, registry
    ):
        """A second Google account with the owner's email cannot be merged."""
        # Arrange
        existing = await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))

        # Act
        with pytest.raises(EmailMergeBlockedError) as exc_info:
            await resolver.resolve(GOOGLE, google_profile("g9", "a@x.com"))

        # Assert
        assert "user already has a google link" in str(exc_info.value)
        assert "did not verify" not in str(exc_info.value)
        links = await registry.list_links(existing.id)
        assert [link.subject_id for link in links] == ["g1"]

    @pytest.mark.asyncio
    async def test_placeholder_user_reattached_after_unlink(self, resolver, registry):
        """A LINE-only identity finds its user again via the placeholder address."""
        # Arrange
        user = await resolver.resolve(LINE, line_profile("l5"))
        await resolver.resolve(
            GOOGLE, google_profile("g5", "c@x.com"), pending_link_user_id=user.id
        )
        await resolver.unlink(user.id, LINE)

        # Act
        again = await resolver.resolve(LINE, line_profile("l5"))

        # Assert
        assert again.id == user.id
        assert {link.provider for link in await registry.list_links(user.id)} == {
            LINE,
            GOOGLE,
        }


class TestLinking(TestIdentityResolver):
    """Tests for the explicit linking path."""

    @pytest.mark.asyncio
    async def test_link_adds_provider_to_initiating_user(self, resolver, registry):
        """A pending link attaches the identity even with a different email."""
        # Arrange
        u3 = await resolver.resolve(GOOGLE, google_profile("g3", "c@x.com"))

        # Act
        user = await resolver.resolve(
            LINE, line_profile("l3", "other@x.com"), pending_link_user_id=u3.id
        )

        # Assert
        assert user.id == u3.id
        links = await registry.list_links(u3.id)
        assert [(link.provider, link.subject_id) for link in links] == [
            (GOOGLE, "g3"),
            (LINE, "l3"),
        ]

    @pytest.mark.asyncio
    async def test_identity_owned_elsewhere_is_rejected(self, resolver, registry):
        """Linking another user's LINE identity fails and changes nothing."""
        # Arrange
        u4 = await resolver.resolve(LINE, line_profile("l1"))
        u3 = await resolver.resolve(GOOGLE, google_profile("g3", "c@x.com"))

        # Act
        with pytest.raises(ProviderAlreadyLinkedElsewhereError):
            await resolver.resolve(
                LINE, line_profile("l1"), pending_link_user_id=u3.id
            )

        # Assert
        assert [link.provider for link in await registry.list_links(u3.id)] == [
            GOOGLE
        ]
        owner, _ = await registry.find_link_by_provider(LINE, "l1")
        assert owner.id == u4.id

    @pytest.mark.asyncio
    async def test_relinking_same_identity_is_idempotent(self, resolver, registry):
        """Linking an identity the user already owns succeeds without a new row."""
        # Arrange
        u3 = await resolver.resolve(GOOGLE, google_profile("g3", "c@x.com"))
        await resolver.resolve(LINE, line_profile("l3"), pending_link_user_id=u3.id)

        # Act
        user = await resolver.resolve(
            LINE, line_profile("l3"), pending_link_user_id=u3.id
        )

        # Assert
        assert user.id == u3.id
        assert len(await registry.list_links(u3.id)) == 2

    @pytest.mark.asyncio
    async def test_second_account_of_linked_provider_is_noop(
        self, resolver, registry
    ):
        """A user who already has LINE keeps their original LINE link."""
        # Arrange
        u3 = await resolver.resolve(GOOGLE, google_profile("g3", "c@x.com"))
        await resolver.resolve(LINE, line_profile("l3"), pending_link_user_id=u3.id)

        # Act
        user = await resolver.resolve(
            LINE, line_profile("l4"), pending_link_user_id=u3.id
        )

        # Assert
        assert user.id == u3.id
        links = await registry.list_links(u3.id)
        assert [link.subject_id for link in links] == ["g3", "l3"]
        assert await registry.find_link_by_provider(LINE, "l4") is None

    @pytest.mark.asyncio
    async def test_unknown_linking_user_raises(self, resolver):
        """A pending link for a user that no longer exists fails."""
        with pytest.raises(NotFoundError):
            await resolver.resolve(
                LINE, line_profile("l3"), pending_link_user_id=UserId(uuid4())
            )


class TestUnlink(TestIdentityResolver):
    """Tests for unlink and listing."""

    @pytest.mark.asyncio
    async def test_last_link_is_rejected(self, resolver, registry):
        """The only sign-in method cannot be removed."""
        # Arrange
        user = await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))

        # Act
        with pytest.raises(LastLinkRejectedError):
            await resolver.unlink(user.id, GOOGLE)

        # Assert
        assert len(await registry.list_links(user.id)) == 1

    @pytest.mark.asyncio
    async def test_unlink_one_of_two(self, resolver):
        """With two providers either one can be removed."""
        # Arrange
        user = await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))
        await resolver.resolve(LINE, line_profile("l1"), pending_link_user_id=user.id)

        # Act
        await resolver.unlink(user.id, GOOGLE)

        # Assert
        links = await resolver.linked_accounts(user.id)
        assert [link.provider for link in links] == [LINE]

    @pytest.mark.asyncio
    async def test_unlink_provider_not_linked(self, resolver):
        """Removing a provider the user never linked fails with not_linked."""
        # Arrange
        user = await resolver.resolve(GOOGLE, google_profile("g1", "a@x.com"))

        # Act & Assert
        with pytest.raises(NotLinkedError) as exc_info:
            await resolver.unlink(user.id, LINE)
        assert exc_info.value.code == "not_linked"


class RacingRegistry(InMemoryProviderLinkRegistry):
    """Registry where another request creates the identity first."""

    def __init__(self, seeder: AccountSeeder, profile: ExternalProfile) -> None:
        super().__init__()
        self.seeder = seeder
        self.profile = profile
        self.raced = False
        self.conflicts = 0

    async def find_user_by_email(self, email):
        found = await super().find_user_by_email(email)
        if not self.raced:
            # The other request commits between our read and our insert
            self.raced = True
            winner = await super().create_user_with_link(
                ProviderKind.GOOGLE, self.profile, email
            )
            await self.seeder.seed_new_user(winner.id)
        return found

    async def create_user_with_link(self, provider, profile, email):
        try:
            return await super().create_user_with_link(provider, profile, email)
        except StorageConflictError:
            self.conflicts += 1
            raise


class TestStorageConflict:
    """Tests for recovery from lost uniqueness races."""

    @pytest.mark.asyncio
    async def test_conflict_resolves_to_concurrently_created_user(self):
        """The resolver re-reads and returns the winner instead of failing."""
        # Arrange
        seeder = InMemoryAccountSeeder()
        profile = google_profile("g1", "a@x.com")
        registry = RacingRegistry(seeder, profile)
        resolver = IdentityResolver(registry=registry, seeder=seeder)

        # Act
        user = await resolver.resolve(GOOGLE, profile)

        # Assert
        owner, _ = await registry.find_link_by_provider(GOOGLE, "g1")
        assert user.id == owner.id
        assert registry.conflicts == 1
        assert len(seeder.categories) == 1
