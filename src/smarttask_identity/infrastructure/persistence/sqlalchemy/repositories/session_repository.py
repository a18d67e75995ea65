"""SQLAlchemy implementation of SessionRepository.

Provides data access for SessionModel. Revocations are single conditional
UPDATE statements so a concurrent refresh never sees a torn write.
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from smarttask_identity.domain.session import Session, SessionRepository
from smarttask_identity.domain.shared.time import ensure_tz_aware, utc_now
from smarttask_identity.infrastructure.persistence.sqlalchemy.models import (
    SessionModel,
)

logger = logging.getLogger(__name__)


class SessionRepositorySQLAlchemy(SessionRepository):
    """SQLAlchemy implementation of SessionRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Parameters
        ----------
        session_factory
            Shared async session maker; one session is opened per call
        """
        self._session_factory = session_factory

    def _to_data(self, model: SessionModel) -> Session:
        """Map SQLAlchemy model to the immutable session record."""
        return Session(
            id=model.id,
            user_id=model.user_id,
            refresh_token=model.refresh_token,
            is_revoked=model.is_revoked,
            expires_at=ensure_tz_aware(model.expires_at),
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
        )

    async def create(
        self,
        user_id: UUID,
        refresh_token: str,
        expires_at: datetime,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Session:
        now = utc_now()
        model = SessionModel(
            user_id=user_id,
            refresh_token=refresh_token,
            is_revoked=False,
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
            updated_at=now,
        )
        async with self._session_factory() as session, session.begin():
            session.add(model)
            await session.flush()
            data = self._to_data(model)

        logger.info("Session created for user %s: %s", user_id, data.id)
        return data

    async def find_by_refresh_token(self, refresh_token: str) -> Session | None:
        stmt = select(SessionModel).where(SessionModel.refresh_token == refresh_token)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return self._to_data(model) if model else None

    async def find_by_id(self, session_id: UUID) -> Session | None:
        async with self._session_factory() as session:
            model = await session.get(SessionModel, session_id)
            return self._to_data(model) if model else None

    async def revoke(self, session_id: UUID, user_id: UUID | None = None) -> bool:
        stmt = update(SessionModel).where(
            SessionModel.id == session_id,
            SessionModel.is_revoked.is_(False),
        )
        if user_id is not None:
            stmt = stmt.where(SessionModel.user_id == user_id)
        stmt = stmt.values(is_revoked=True, updated_at=utc_now()).execution_options(
            synchronize_session=False,
        )

        async with self._session_factory() as session, session.begin():
            result = await session.execute(stmt)
            changed = result.rowcount > 0

        if changed:
            logger.info("Session revoked: %s", session_id)
        return changed

    async def revoke_all_for_user(self, user_id: UUID) -> int:
        stmt = (
            update(SessionModel)
            .where(
                SessionModel.user_id == user_id,
                SessionModel.is_revoked.is_(False),
            )
            .values(is_revoked=True, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session, session.begin():
            result = await session.execute(stmt)
            count = result.rowcount

        logger.info("All sessions revoked for user %s (count=%d)", user_id, count)
        return count

    async def find_active_by_user_id(self, user_id: UUID, now: datetime) -> list[Session]:
        stmt = (
            select(SessionModel)
            .where(
                SessionModel.user_id == user_id,
                SessionModel.is_revoked.is_(False),
                SessionModel.expires_at > now,
            )
            .order_by(SessionModel.created_at.desc())
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_data(model) for model in result.scalars().all()]

    async def delete_expired(self, now: datetime) -> int:
        stmt = (
            delete(SessionModel)
            .where(SessionModel.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session, session.begin():
            result = await session.execute(stmt)
            count = result.rowcount

        if count > 0:
            logger.info("Expired sessions cleaned up: %d", count)
        return count

    async def count_for_user(self, user_id: UUID, now: datetime) -> tuple[int, int, int]:
        active = (SessionModel.is_revoked.is_(False)) & (SessionModel.expires_at > now)
        stmt = select(
            func.count(),
            func.coalesce(func.sum(case((active, 1), else_=0)), 0),
            func.coalesce(func.sum(case((SessionModel.is_revoked.is_(True), 1), else_=0)), 0),
        ).where(SessionModel.user_id == user_id)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            total, active_count, revoked = result.one()
            return int(total), int(active_count), int(revoked)
