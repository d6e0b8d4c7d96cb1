"""Domain layer errors.

Every error carries a short machine-readable ``code`` which the interface
layer uses for redirect query strings and JSON bodies. Messages are for
logs only and never reach the client.
"""

from tracker.domain.value import ProviderKind


class DomainError(Exception):
    """Base domain error."""

    code = "domain_error"


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ProviderDisabledError(DomainError):
    """Raised when a provider is not configured for this deployment."""

    code = "provider_disabled"

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Provider is not enabled: {provider}")


class ExchangeFailedError(DomainError):
    """Provider rejected the authorization code or could not be reached.

    Covers HTTP errors, malformed token responses and profiles without a
    subject id. Never retried: authorization codes are single-use.
    """

    code = "exchange_failed"

    def __init__(self, provider: ProviderKind, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider.value} code exchange failed: {reason}")


class StateMismatchError(DomainError):
    """OAuth state did not match a pending linking session."""

    code = "state_mismatch"


class LinkNotPendingError(StateMismatchError):
    """No live linking session exists for the browser session."""

    def __init__(self, browser_session_id: str | None):
        self.browser_session_id = browser_session_id
        super().__init__("No pending linking session")


class LinkTokenMismatchError(StateMismatchError):
    """A linking session existed but the supplied token did not match it."""

    def __init__(self, browser_session_id: str):
        self.browser_session_id = browser_session_id
        super().__init__("Linking session token mismatch")


class ProviderAlreadyLinkedElsewhereError(DomainError):
    """The external identity is already bound to a different user."""

    code = "provider_already_linked"

    def __init__(self, provider: ProviderKind, subject_id: str):
        self.provider = provider
        self.subject_id = subject_id
        super().__init__(
            f"{provider.value} identity {subject_id} is linked to another user"
        )


class LastLinkRejectedError(DomainError):
    """Removing the link would leave the user with no way to sign in."""

    code = "last_link"

    def __init__(self, user_id: str, provider: ProviderKind):
        self.user_id = user_id
        self.provider = provider
        super().__init__(
            f"Cannot unlink {provider.value}: it is the only sign-in method "
            f"for user {user_id}"
        )


class EmailMergeBlockedError(DomainError):
    """Email matches an existing user but the merge policy forbids attaching.

    The user has to sign in with their original provider and link
    explicitly.
    """

    code = "email_in_use"

    def __init__(self, provider: ProviderKind, email: str, reason: str):
        self.provider = provider
        self.email = email
        self.reason = reason
        super().__init__(f"Email {email} already belongs to a user; {reason}")


class StorageConflictError(DomainError):
    """A uniqueness constraint fired despite the in-transaction checks.

    Raised by the registry when a concurrent request won a race. The
    resolver recovers by re-reading.
    """

    code = "storage_conflict"


class NotLinkedError(NotFoundError):
    """The user has no link for the provider."""

    code = "not_linked"

    def __init__(self, user_id: str, provider: ProviderKind):
        self.user_id = user_id
        self.provider = provider
        super().__init__("ProviderLink", f"{user_id}:{provider.value}")


class AuthorizationDeniedError(DomainError):
    """The user declined consent at the provider."""

    code = "access_denied"

    def __init__(self, provider: ProviderKind, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider.value} authorization denied: {reason}")
