"""Identity schemas and data structures.

These are simple data classes used for transferring identity
data between components and out to callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from smarttask_identity.domain.session import Session
    from smarttask_identity.domain.user import User


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    This represents the data extracted from a verified JWT token.

    Attributes
    ----------
    user_id
        The unique identifier of the user
    email
        The user's email address
    token_type
        The ``type`` claim; only "access" tokens are minted by this package
    issued_at
        Token issue timestamp
    exp
        Token expiration timestamp
    """

    user_id: UUID
    email: str
    token_type: str
    issued_at: datetime
    exp: datetime

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.token_type == "access"


@dataclass(frozen=True)
class UserProfile:
    """Public view of a user; never carries the password hash."""

    id: UUID
    email: str
    display_name: str | None
    is_active: bool
    is_admin: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserProfile:
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            is_active=user.is_active,
            is_admin=user.is_admin,
            created_at=user.created_at,
        )


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful register or login.

    ``refresh_token`` is meant for an out-of-band channel (http-only cookie);
    only ``user`` and ``access_token`` belong in a response body.
    """

    user: UserProfile
    access_token: str
    refresh_token: str
    session: Session

    def __repr__(self) -> str:
        return f"AuthResult(user={self.user!r}, session_id={self.session.id})"


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of a refresh.

    ``refresh_token`` is only set when refresh-token rotation is enabled and
    the caller must replace the stored value.
    """

    access_token: str
    refresh_token: str | None = None

    def __repr__(self) -> str:
        return f"RefreshResult(rotated={self.refresh_token is not None})"


@dataclass(frozen=True)
class SessionStats:
    """Session counts for one user."""

    total_sessions: int
    active_sessions: int
    revoked_sessions: int
