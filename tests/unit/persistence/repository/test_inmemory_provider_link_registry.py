"""Unit tests for InMemoryProviderLinkRegistry."""

import asyncio

import pytest

from tracker.domain.error import (
    LastLinkRejectedError,
    NotLinkedError,
    ProviderAlreadyLinkedElsewhereError,
    StorageConflictError,
)
from tracker.domain.value import ExternalProfile, ProviderKind
from tracker.persistence.repository.inmemory import InMemoryProviderLinkRegistry


def profile(subject_id: str, email: str | None = None) -> ExternalProfile:
    return ExternalProfile(
        subject_id=subject_id, email=email, email_verified=True, display_name="Kai"
    )


@pytest.fixture
def registry():
    return InMemoryProviderLinkRegistry()


@pytest.mark.asyncio
async def test_create_user_with_link_is_found_by_identity_and_email(registry):
    user = await registry.create_user_with_link(
        ProviderKind.GOOGLE, profile("g1", "a@x.com"), "A@X.com"
    )

    owner, link = await registry.find_link_by_provider(ProviderKind.GOOGLE, "g1")
    assert owner == user
    assert link.user_id == user.id
    assert link.email == "a@x.com"
    assert await registry.find_user_by_email("a@x.com") == user
    assert await registry.find_user_by_id(user.id) == user


@pytest.mark.asyncio
async def test_duplicate_identity_is_a_storage_conflict(registry):
    await registry.create_user_with_link(
        ProviderKind.GOOGLE, profile("g1", "a@x.com"), "a@x.com"
    )

    with pytest.raises(StorageConflictError):
        await registry.create_user_with_link(
            ProviderKind.GOOGLE, profile("g1", "other@x.com"), "other@x.com"
        )


@pytest.mark.asyncio
async def test_concurrent_add_link_binds_identity_to_one_user(registry):
    """Of two users racing for the same LINE identity exactly one wins."""
    first = await registry.create_user_with_link(
        ProviderKind.GOOGLE, profile("g1", "a@x.com"), "a@x.com"
    )
    second = await registry.create_user_with_link(
        ProviderKind.GOOGLE, profile("g2", "b@x.com"), "b@x.com"
    )

    results = await asyncio.gather(
        registry.add_link(first.id, ProviderKind.LINE, profile("l1")),
        registry.add_link(second.id, ProviderKind.LINE, profile("l1")),
        return_exceptions=True,
    )

    errors = [r for r in results if isinstance(r, Exception)]
    assert len(errors) == 1
    assert isinstance(errors[0], ProviderAlreadyLinkedElsewhereError)
    owner, _ = await registry.find_link_by_provider(ProviderKind.LINE, "l1")
    assert owner.id == first.id


@pytest.mark.asyncio
async def test_concurrent_add_link_by_same_user_creates_one_link(registry):
    """A double-submitted link callback leaves a single row."""
    user = await registry.create_user_with_link(
        ProviderKind.GOOGLE, profile("g1", "a@x.com"), "a@x.com"
    )

    first, second = await asyncio.gather(
        registry.add_link(user.id, ProviderKind.LINE, profile("l1")),
        registry.add_link(user.id, ProviderKind.LINE, profile("l1")),
    )

    assert first.id == second.id
    links = await registry.list_links(user.id)
    assert sorted(link.provider.value for link in links) == ["google", "line"]


@pytest.mark.asyncio
async def test_add_link_is_idempotent(registry):
    user = await registry.create_user_with_link(
        ProviderKind.GOOGLE, profile("g1", "a@x.com"), "a@x.com"
    )

    first = await registry.add_link(user.id, ProviderKind.LINE, profile("l1"))
    again = await registry.add_link(user.id, ProviderKind.LINE, profile("l1"))

    assert again.id == first.id
    assert len(await registry.list_links(user.id)) == 2


@pytest.mark.asyncio
async def test_remove_last_link_is_rejected(registry):
    user = await registry.create_user_with_link(
        ProviderKind.LINE, profile("l1"), "l1@line.local"
    )

    with pytest.raises(LastLinkRejectedError):
        await registry.remove_link(user.id, ProviderKind.LINE)

    assert len(await registry.list_links(user.id)) == 1


@pytest.mark.asyncio
async def test_remove_missing_link(registry):
    user = await registry.create_user_with_link(
        ProviderKind.LINE, profile("l1"), "l1@line.local"
    )

    with pytest.raises(NotLinkedError):
        await registry.remove_link(user.id, ProviderKind.GOOGLE)


@pytest.mark.asyncio
async def test_remove_link_keeps_others(registry):
    user = await registry.create_user_with_link(
        ProviderKind.LINE, profile("l1"), "l1@line.local"
    )
    await registry.add_link(user.id, ProviderKind.GOOGLE, profile("g1", "a@x.com"))

    await registry.remove_link(user.id, ProviderKind.LINE)

    links = await registry.list_links(user.id)
    assert [link.provider for link in links] == [ProviderKind.GOOGLE]
    assert await registry.find_link_by_provider(ProviderKind.LINE, "l1") is None


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(registry):
    with pytest.raises(RuntimeError):
        async with registry.transaction():
            await registry.create_user_with_link(
                ProviderKind.GOOGLE, profile("g1", "a@x.com"), "a@x.com"
            )
            raise RuntimeError("boom")

    assert await registry.find_link_by_provider(ProviderKind.GOOGLE, "g1") is None
    assert await registry.find_user_by_email("a@x.com") is None
