from abc import ABC


class UserError(ABC, Exception):
    """Base class for errors surfaced to the caller.

    The message of every UserError is shown to the user verbatim, so it
    must not contain sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a referenced document does not exist."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when no valid credential is present."""

    def __init__(self, message: str = "User must be logged in") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when the credential is valid but the role or ownership is insufficient."""


class ValidationError(UserError):
    """Raised when a payload is malformed, incomplete or oversized."""


class FailedPreconditionError(UserError):
    """Raised when the target is not in a state that allows the operation (e.g. non-empty folder)."""


class UpstreamError(UserError):
    """Raised when an external backend (e.g. the generative model) fails."""
