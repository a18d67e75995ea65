"""Audit sink capability.

Security-relevant state changes are reported through an injected sink
instead of a global logger, so tests can pass a recording fake.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol
from uuid import UUID


class AuditEvent:
    """Names of the events emitted by the identity engine."""

    USER_REGISTERED = "user_registered"
    USER_LOGIN = "user_login"
    FAILED_LOGIN_ATTEMPT = "failed_login_attempt"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_UNLOCKED = "account_unlocked"
    USER_LOGOUT = "user_logout"
    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REUSE_DETECTED = "token_reuse_detected"
    SESSION_REVOKED = "session_revoked"
    ALL_SESSIONS_REVOKED = "all_sessions_revoked"
    PASSWORD_CHANGED = "password_changed"
    PROFILE_UPDATED = "profile_updated"


class AuditSink(Protocol):
    """Anything that can record an audit event."""

    def record(
        self,
        event: str,
        actor_id: UUID | None,
        meta: Mapping[str, Any] | None = None,
    ) -> None: ...
