"""Abstract repository interface for refresh sessions.

This interface defines the contract for session persistence.
Implementations can use SQLAlchemy, Redis, or any other storage.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from smarttask_identity.domain.session.entities import Session


class SessionRepository(ABC):
    """
    Abstract repository for refresh sessions.

    Revocation must be a single conditional update
    (``SET is_revoked = true WHERE id = ? AND is_revoked = false``) so that a
    concurrent lookup observes either the pre- or the post-revoke state.
    """

    @abstractmethod
    async def create(
        self,
        user_id: UUID,
        refresh_token: str,
        expires_at: datetime,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Session:
        """Persist a new, non-revoked session.

        Parameters
        ----------
        user_id
            The owning user's identifier
        refresh_token
            The opaque random refresh token value
        expires_at
            Absolute expiry of the session

        Returns
        -------
        The stored session
        """

    @abstractmethod
    async def find_by_refresh_token(self, refresh_token: str) -> Session | None:
        """Find a session (in any state) by its refresh token value."""

    @abstractmethod
    async def find_by_id(self, session_id: UUID) -> Session | None:
        """Find a session (in any state) by its identifier."""

    @abstractmethod
    async def revoke(self, session_id: UUID, user_id: UUID | None = None) -> bool:
        """Revoke one session if it exists, is not revoked and (when
        ``user_id`` is given) belongs to that user.

        Returns
        -------
        True if a row changed, False otherwise
        """

    @abstractmethod
    async def revoke_all_for_user(self, user_id: UUID) -> int:
        """Revoke every non-revoked session of a user.

        Returns
        -------
        Number of sessions revoked
        """

    @abstractmethod
    async def find_active_by_user_id(self, user_id: UUID, now: datetime) -> list[Session]:
        """Sessions that are not revoked and expire after ``now``, newest first."""

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Remove sessions whose expiry is at or before ``now``.

        Returns
        -------
        Number of sessions deleted
        """

    @abstractmethod
    async def count_for_user(self, user_id: UUID, now: datetime) -> tuple[int, int, int]:
        """Return ``(total, active, revoked)`` session counts for a user."""
