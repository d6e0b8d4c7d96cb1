"""User aggregate root.

A user is the canonical identity that owns expenses and categories,
regardless of which provider they signed in with.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from tracker.domain.model.common import DomainModel
from tracker.domain.value import UserId


class User(DomainModel):
    """User aggregate root - provider-agnostic.

    One user account can have several linked provider identities.
    """

    id: UserId
    email: str  # Primary email, or a placeholder when no provider disclosed one
    name: str
    avatar_url: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
