"""Refresh session lifecycle and replay detection."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, NoReturn
from uuid import UUID

from smarttask_identity.domain.shared.time import Clock, utc_now
from smarttask_identity.exceptions import (
    InvalidRefreshTokenError,
    RefreshTokenExpiredError,
    TokenReuseDetectedError,
)
from smarttask_identity.schemas import SessionStats
from smarttask_identity.services.audit import AuditEvent, AuditSink

if TYPE_CHECKING:
    from smarttask_identity.domain.session import Session, SessionRepository
    from smarttask_identity.domain.user import User, UserRepository

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32


@dataclass(frozen=True)
class RotationResult:
    """A session that passed rotation checks, with its owner.

    ``user`` is None when the owning user record no longer exists.
    ``refresh_token`` is the value the caller must hand out from now on; it
    differs from the presented one only when value rotation is enabled.
    """

    session: Session
    user: User | None
    refresh_token: str


class SessionManager:
    """
    Owns creation, rotation and revocation of refresh sessions.

    Session states: ACTIVE -> EXPIRED and ACTIVE -> REVOKED, both terminal.
    This class is the only writer of ``Session.is_revoked``.

    Presenting a refresh token whose session is already revoked is treated
    as theft: every session of the owner is revoked.

    By default the refresh token value stays the same for the whole life of
    a session. With ``rotate_refresh_tokens=True`` each successful rotation
    revokes the presented session and issues a successor with a fresh value
    and the same absolute expiry.
    """

    def __init__(
        self,
        session_repository: SessionRepository,
        user_repository: UserRepository,
        audit_sink: AuditSink,
        *,
        session_lifetime: timedelta = timedelta(days=7),
        rotate_refresh_tokens: bool = False,
        clock: Clock = utc_now,
    ):
        self._session_repo = session_repository
        self._user_repo = user_repository
        self._audit = audit_sink
        self._session_lifetime = session_lifetime
        self._rotate_refresh_tokens = rotate_refresh_tokens
        self._clock = clock

    @staticmethod
    def generate_refresh_token() -> str:
        """Return an unguessable token value (256 bits of entropy)."""
        return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)

    async def create_session(
        self,
        user_id: UUID,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Session:
        expires_at = self._clock() + self._session_lifetime
        return await self._session_repo.create(
            user_id,
            self.generate_refresh_token(),
            expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    async def find_by_refresh_token(self, refresh_token: str) -> Session | None:
        if not refresh_token:
            return None
        return await self._session_repo.find_by_refresh_token(refresh_token)

    async def rotate(self, presented_token: str) -> RotationResult:
        """Validate a presented refresh token.

        Raises
        ------
        InvalidRefreshTokenError
            No session carries this token
        TokenReuseDetectedError
            The session was already revoked; all of the owner's sessions
            are revoked before this is raised
        RefreshTokenExpiredError
            The session is past its expiry; it is revoked before this is raised
        """
        if not presented_token:
            raise InvalidRefreshTokenError

        session = await self._session_repo.find_by_refresh_token(presented_token)
        if session is None:
            raise InvalidRefreshTokenError

        if session.is_revoked:
            await self._handle_reuse(session)

        if session.is_expired(self._clock()):
            await self._session_repo.revoke(session.id)
            logger.info("Refresh attempted on expired session %s", session.id)
            raise RefreshTokenExpiredError

        user = await self._user_repo.find_by_id(session.user_id)

        if not self._rotate_refresh_tokens:
            return RotationResult(
                session=session,
                user=user,
                refresh_token=session.refresh_token,
            )

        # Losing the race against a concurrent revoke of the same value
        # means someone else presented it first.
        if not await self._session_repo.revoke(session.id):
            await self._handle_reuse(session)

        successor = await self._session_repo.create(
            session.user_id,
            self.generate_refresh_token(),
            session.expires_at,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
        )
        logger.debug("Rotated session %s -> %s", session.id, successor.id)
        return RotationResult(
            session=successor,
            user=user,
            refresh_token=successor.refresh_token,
        )

    async def revoke(
        self,
        session_id: UUID,
        owner_user_id: UUID | None = None,
        *,
        actor_id: UUID | None = None,
    ) -> bool:
        """Revoke one session; with ``owner_user_id`` only if it owns it.

        ``actor_id`` names the audited actor when no owner filter is given.

        Returns
        -------
        True if the session went from active to revoked
        """
        changed = await self._session_repo.revoke(session_id, owner_user_id)
        if changed:
            self._audit.record(
                AuditEvent.SESSION_REVOKED,
                owner_user_id or actor_id,
                {"session_id": session_id},
            )
        return changed

    async def revoke_all(self, user_id: UUID, *, reason: str | None = None) -> int:
        count = await self._session_repo.revoke_all_for_user(user_id)
        meta: dict[str, object] = {"session_count": count}
        if reason:
            meta["reason"] = reason
        self._audit.record(AuditEvent.ALL_SESSIONS_REVOKED, user_id, meta)
        return count

    async def list_active(self, user_id: UUID) -> list[Session]:
        return await self._session_repo.find_active_by_user_id(user_id, self._clock())

    async def sweep_expired(self) -> int:
        """Delete sessions past their expiry. Safe to run on a timer."""
        return await self._session_repo.delete_expired(self._clock())

    async def get_session_stats(self, user_id: UUID) -> SessionStats:
        total, active, revoked = await self._session_repo.count_for_user(
            user_id,
            self._clock(),
        )
        return SessionStats(
            total_sessions=total,
            active_sessions=active,
            revoked_sessions=revoked,
        )

    async def _handle_reuse(self, session: Session) -> NoReturn:
        revoked = await self._session_repo.revoke_all_for_user(session.user_id)
        logger.warning(
            "Refresh token reuse detected for user %s (session %s); "
            "revoked %d sessions",
            session.user_id,
            session.id,
            revoked,
        )
        self._audit.record(
            AuditEvent.TOKEN_REUSE_DETECTED,
            session.user_id,
            {
                "session_id": session.id,
                "action": "all_sessions_revoked",
                "session_count": revoked,
            },
        )
        raise TokenReuseDetectedError
