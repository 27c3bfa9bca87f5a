from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class AuthenticationError(UserError):
    """Base class for admission denials.

    Every denial is terminal for the current request. Subclasses are never
    converted into one another, callers rely on ``reason`` to tell them apart.
    """

    reason = "authentication-failed"
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NoSessionError(AuthenticationError):
    """Raised when the request carries no session or an unknown one."""

    reason = "no-session"
    default_message = "No valid session"


class SessionExpiredError(AuthenticationError):
    """Raised when the session exists but has outlived its lifetime."""

    reason = "session-expired"
    default_message = "Session expired"


class CsrfMissingError(AuthenticationError):
    """Raised when a state-changing request carries no CSRF token at all."""

    reason = "csrf-missing"
    default_message = "CSRF token missing"


class CsrfInvalidError(AuthenticationError):
    """Raised when the CSRF token is absent on login or does not match the session."""

    reason = "csrf-invalid"
    default_message = "Invalid CSRF token"


class BadCredentialsError(AuthenticationError):
    """Raised when login name and password do not match a known user.

    Unknown login and wrong password share this error and its message.
    ``rotated_token`` holds the CSRF value that replaced the presented one.
    """

    reason = "bad-credentials"
    default_message = "Invalid credentials"

    def __init__(self, message: str | None = None, rotated_token: str | None = None) -> None:
        super().__init__(message)
        self.rotated_token = rotated_token


class AuthenticationRequiredError(AuthenticationError):
    """Raised when an anonymous session requests a protected resource."""

    reason = "authentication-required"
    default_message = "Authentication required"
