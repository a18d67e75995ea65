"""Identity and authentication exceptions.

Every domain failure carries an ``AuthErrorKind`` tag so that callers can
dispatch on ``error.kind`` instead of on the class hierarchy::

    try:
        await service.refresh_token(token)
    except AuthError as e:
        match e.kind:
            case AuthErrorKind.TOKEN_REUSE_DETECTED:
                ...

Unexpected infrastructure failures surface as ``InternalAuthError`` with an
opaque message; the original exception is chained as ``__cause__``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum


class AuthErrorKind(str, Enum):
    """Tag identifying the kind of an authentication failure."""

    USER_EXISTS = "USER_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
    TOKEN_REUSE_DETECTED = "TOKEN_REUSE_DETECTED"
    REFRESH_TOKEN_EXPIRED = "REFRESH_TOKEN_EXPIRED"
    USER_INVALID = "USER_INVALID"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_DISPLAY_NAME = "INVALID_DISPLAY_NAME"
    INTERNAL = "INTERNAL"


class AuthError(Exception):
    """Base exception for all authentication errors."""

    kind: AuthErrorKind = AuthErrorKind.INTERNAL

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Stable string code, e.g. for an API error envelope."""
        return self.kind.value


class UserExistsError(AuthError):
    """Raised when registering an email that is already taken."""

    kind = AuthErrorKind.USER_EXISTS

    def __init__(self, message: str = "User with this email already exists"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login."""

    kind = AuthErrorKind.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class AccountLockedError(AuthError):
    """Raised when an account is locked due to too many failed login attempts."""

    kind = AuthErrorKind.ACCOUNT_LOCKED

    def __init__(
        self,
        message: str = "Account is temporarily locked",
        locked_until: datetime | None = None,
    ):
        self.locked_until = locked_until
        super().__init__(message)


class AccountInactiveError(AuthError):
    """Raised when a deactivated account tries to log in."""

    kind = AuthErrorKind.ACCOUNT_INACTIVE

    def __init__(self, message: str = "Account is deactivated"):
        super().__init__(message)


class InvalidRefreshTokenError(AuthError):
    """Raised when a refresh token does not belong to any session."""

    kind = AuthErrorKind.INVALID_REFRESH_TOKEN

    def __init__(self, message: str = "Invalid refresh token"):
        super().__init__(message)


class TokenReuseDetectedError(AuthError):
    """Raised when a revoked refresh token is presented again.

    All sessions of the owning user have been revoked by the time this is
    raised.
    """

    kind = AuthErrorKind.TOKEN_REUSE_DETECTED

    def __init__(self, message: str = "Security violation detected"):
        super().__init__(message)


class RefreshTokenExpiredError(AuthError):
    """Raised when a refresh token has expired."""

    kind = AuthErrorKind.REFRESH_TOKEN_EXPIRED

    def __init__(self, message: str = "Refresh token has expired"):
        super().__init__(message)


class UserInvalidError(AuthError):
    """Raised when the session owner became inactive, locked or vanished."""

    kind = AuthErrorKind.USER_INVALID

    def __init__(self, message: str = "User account is invalid or locked"):
        super().__init__(message)


class InvalidPasswordError(AuthError):
    """Raised when the current password does not match on password change."""

    kind = AuthErrorKind.INVALID_PASSWORD

    def __init__(self, message: str = "Current password is incorrect"):
        super().__init__(message)


class UserNotFoundError(AuthError):
    """Raised when a user id cannot be resolved."""

    kind = AuthErrorKind.USER_NOT_FOUND

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class EmailTakenError(AuthError):
    """Raised when a profile update collides with another user's email."""

    kind = AuthErrorKind.EMAIL_TAKEN

    def __init__(self, message: str = "Email is already taken"):
        super().__init__(message)


class InvalidTokenError(AuthError):
    """Raised when a JWT token is invalid, expired, or malformed."""

    kind = AuthErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    kind = AuthErrorKind.WEAK_PASSWORD

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class InvalidEmailError(AuthError, ValueError):
    """Raised when email format is invalid."""

    kind = AuthErrorKind.INVALID_EMAIL

    def __init__(self, message: str = "Invalid email format"):
        super().__init__(message)


class InvalidDisplayNameError(AuthError, ValueError):
    """Raised when a display name does not fit the user record."""

    kind = AuthErrorKind.INVALID_DISPLAY_NAME

    def __init__(self, message: str = "Invalid display name"):
        super().__init__(message)


class InternalAuthError(AuthError):
    """Opaque failure wrapping an unexpected infrastructure error."""

    kind = AuthErrorKind.INTERNAL

    def __init__(self, message: str = "Internal authentication error"):
        super().__init__(message)
