"""Pending login/link round-trip."""

from datetime import datetime
from typing import Optional

from tracker.domain.model.common import DomainModel
from tracker.domain.value import BrowserSessionId, ProviderKind, UserId


class LinkingSession(DomainModel):
    """State that survives the redirect to a provider and back.

    initiating_user_id is None for a plain login and set when an
    authenticated user is attaching another provider.
    """

    browser_session_id: BrowserSessionId
    token: str  # Anti-forgery value echoed through the OAuth state parameter
    initiating_user_id: Optional[UserId] = None
    provider: Optional[ProviderKind] = None
    created_at: datetime
