"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from tracker.domain.model import ProviderLink, User
from tracker.domain.value import ProviderKind, ProviderLinkId, UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        email=row["email"],
        name=row["name"],
        avatar_url=row.get("avatar_url"),
        created_at=row["created_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insert/update
    """
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "avatar_url": user.avatar_url,
        "created_at": user.created_at,
    }


def row_to_provider_link(row: Dict[str, Any]) -> ProviderLink:
    """Convert database row to ProviderLink domain model.

    Args:
        row: Database row as dict

    Returns:
        ProviderLink domain model
    """
    return ProviderLink(
        id=ProviderLinkId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        provider=ProviderKind(row["provider"]),
        subject_id=row["subject_id"],
        email=row.get("email"),
        name=row.get("name"),
        avatar_url=row.get("avatar_url"),
        linked_at=row["linked_at"],
    )


def provider_link_to_dict(link: ProviderLink) -> Dict[str, Any]:
    """Convert ProviderLink domain model to database dict.

    Args:
        link: ProviderLink domain model

    Returns:
        Dict suitable for database insert
    """
    return {
        "id": link.id,
        "user_id": link.user_id,
        "provider": link.provider.value,
        "subject_id": link.subject_id,
        "email": link.email,
        "name": link.name,
        "avatar_url": link.avatar_url,
        "linked_at": link.linked_at,
    }
