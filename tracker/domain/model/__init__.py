"""Domain model entities for the expense tracker."""

from tracker.domain.model.linking_session import LinkingSession
from tracker.domain.model.provider_link import ProviderLink
from tracker.domain.model.user import User

__all__ = [
    "User",
    "ProviderLink",
    "LinkingSession",
]
