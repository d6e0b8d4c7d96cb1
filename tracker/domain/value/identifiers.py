"""Strongly typed identifiers for tracker domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
ProviderLinkId = NewType("ProviderLinkId", UUID)

# Opaque value of the browser session cookie
BrowserSessionId = NewType("BrowserSessionId", str)
