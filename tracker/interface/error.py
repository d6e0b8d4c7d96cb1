"""Interface layer errors."""


class InterfaceError(Exception):
    """Base interface error."""

    code = "interface_error"


class UnauthenticatedError(InterfaceError):
    """Bearer token missing, invalid, expired, or for a user that is gone."""

    code = "unauthenticated"
