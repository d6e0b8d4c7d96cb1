"""Domain value objects for the expense tracker.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import field_validator

from tracker.domain.value.common import ValueObject


class ProviderKind(str, Enum):
    """Supported identity providers."""

    GOOGLE = "google"
    LINE = "line"


class ExternalProfile(ValueObject):
    """Verified profile returned by an identity provider.

    Generic structure for user info returned from either provider after a
    successful authorization-code exchange.
    """

    subject_id: str  # Permanent ID from provider ("sub")
    email: str | None = None  # LINE only discloses email with consent
    email_verified: bool = False  # Provider asserts ownership of the email
    display_name: str = ""
    avatar_url: str | None = None

    @field_validator("subject_id")
    @classmethod
    def validate_subject_id(cls, v: str) -> str:
        """Validate subject id is not blank."""
        v = v.strip()
        if not v or len(v) > 255:
            raise ValueError("Subject id must be 1-255 characters")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        """Lower-case emails so lookups are case-insensitive."""
        if v is None:
            return None
        v = v.strip().lower()
        return v or None


class ProviderCapabilities(ValueObject):
    """Static table of which providers are usable.

    Computed once at startup from configuration.
    """

    enabled: dict[ProviderKind, bool]

    def is_enabled(self, provider: ProviderKind) -> bool:
        """Check whether sign-in with the provider is available."""
        return self.enabled.get(provider, False)

    def enabled_providers(self) -> list[ProviderKind]:
        """List enabled providers in declaration order."""
        return [p for p in ProviderKind if self.is_enabled(p)]
