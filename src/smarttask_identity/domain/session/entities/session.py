"""Refresh session record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class SessionState(str, Enum):
    """Lifecycle state of a refresh session.

    ACTIVE -> EXPIRED and ACTIVE -> REVOKED; both are terminal.
    """

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


@dataclass(frozen=True)
class Session:
    """Immutable refresh session data returned by the session store.

    ``refresh_token`` is a bearer secret; it is excluded from ``repr`` so it
    never ends up in logs by accident.
    """

    id: UUID
    user_id: UUID
    refresh_token: str
    is_revoked: bool
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None

    def is_expired(self, now: datetime) -> bool:
        """Check if the session has passed its expiry horizon."""
        return self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        return self.state(now) is SessionState.ACTIVE

    def state(self, now: datetime) -> SessionState:
        if self.is_revoked:
            return SessionState.REVOKED
        if self.is_expired(now):
            return SessionState.EXPIRED
        return SessionState.ACTIVE

    def __repr__(self) -> str:
        return (
            f"Session(id={self.id}, user_id={self.user_id}, "
            f"is_revoked={self.is_revoked}, expires_at={self.expires_at.isoformat()})"
        )
