"""Provider link entity.

Binds one external identity to a user account.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from tracker.domain.model.common import DomainModel
from tracker.domain.value import ProviderKind, ProviderLinkId, UserId


class ProviderLink(DomainModel):
    """External identity linked to a user account.

    (provider, subject_id) is globally unique and a user holds at most
    one link per provider kind. Profile fields are a snapshot taken when
    the link was created.
    """

    id: ProviderLinkId
    user_id: UserId
    provider: ProviderKind
    subject_id: str  # Permanent ID from provider
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    linked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
