"""Domain value objects for the expense tracker."""

from tracker.domain.value.identifiers import BrowserSessionId, ProviderLinkId, UserId
from tracker.domain.value.types import (
    ExternalProfile,
    ProviderCapabilities,
    ProviderKind,
)

__all__ = [
    # Identifiers
    "UserId",
    "ProviderLinkId",
    "BrowserSessionId",
    # Types
    "ProviderKind",
    "ExternalProfile",
    "ProviderCapabilities",
]
