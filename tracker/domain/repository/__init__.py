"""Repository interfaces for the expense tracker domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence and adapter layers.
"""

from tracker.domain.repository.account_seed import AccountSeeder
from tracker.domain.repository.linking_session import LinkingSessionStore
from tracker.domain.repository.provider_link import ProviderLinkRegistry

__all__ = [
    "AccountSeeder",
    "LinkingSessionStore",
    "ProviderLinkRegistry",
]
