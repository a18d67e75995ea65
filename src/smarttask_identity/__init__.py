"""Identity engine: credentials, sessions and access tokens.

Provides:
- AuthenticationService: register, login, refresh, logout, password change
- SessionManager: refresh session lifecycle and replay detection
- JWTService / PasswordHashingService: token and password primitives
- AuthError and its subclasses, each tagged with an AuthErrorKind
"""

from smarttask_identity.application.context import UserContext
from smarttask_identity.application.policies import LockoutPolicy
from smarttask_identity.application.services import (
    AuthenticationService,
    SessionManager,
)
from smarttask_identity.exceptions import (
    AccountInactiveError,
    AccountLockedError,
    AuthError,
    AuthErrorKind,
    EmailTakenError,
    InternalAuthError,
    InvalidCredentialsError,
    InvalidDisplayNameError,
    InvalidEmailError,
    InvalidPasswordError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    RefreshTokenExpiredError,
    TokenReuseDetectedError,
    UserExistsError,
    UserInvalidError,
    UserNotFoundError,
    WeakPasswordError,
)
from smarttask_identity.schemas import (
    AuthResult,
    RefreshResult,
    SessionStats,
    TokenPayload,
    UserProfile,
)
from smarttask_identity.services import (
    AuditEvent,
    AuditSink,
    JWTService,
    PasswordHashingService,
)

__all__ = [
    "AccountInactiveError",
    "AccountLockedError",
    "AuditEvent",
    "AuditSink",
    "AuthError",
    "AuthErrorKind",
    "AuthResult",
    "AuthenticationService",
    "EmailTakenError",
    "InternalAuthError",
    "InvalidCredentialsError",
    "InvalidDisplayNameError",
    "InvalidEmailError",
    "InvalidPasswordError",
    "InvalidRefreshTokenError",
    "InvalidTokenError",
    "JWTService",
    "LockoutPolicy",
    "PasswordHashingService",
    "RefreshResult",
    "RefreshTokenExpiredError",
    "SessionManager",
    "SessionStats",
    "TokenPayload",
    "TokenReuseDetectedError",
    "UserContext",
    "UserExistsError",
    "UserInvalidError",
    "UserNotFoundError",
    "UserProfile",
    "WeakPasswordError",
]
