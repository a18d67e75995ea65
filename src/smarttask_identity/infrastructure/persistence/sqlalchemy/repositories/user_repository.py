"""SQLAlchemy implementation of UserRepository.

Each method runs in its own short transaction opened from a shared
``async_sessionmaker``, so the repository can live as long as the process.
"""

import logging
from datetime import datetime
from typing import Any, Union
from uuid import UUID

from sqlalchemy import case, func, literal, select, true, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from smarttask_identity.domain.shared.time import ensure_tz_aware, utc_now
from smarttask_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    UserRepository,
    UserRole,
)
from smarttask_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_id(self, user_id: UUID) -> User | None:
        async with self._session_factory() as session:
            model = await session.get(UserModel, user_id)
            return self._map_to_domain(model) if model else None

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email.normalize(email)

        stmt = select(UserModel).where(UserModel.email == email_value)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return self._map_to_domain(model) if model else None

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        user = await self.find_by_email(email)
        return user is not None

    async def create(self, user: User) -> User:
        model = self._map_to_model(user)
        try:
            async with self._session_factory() as session, session.begin():
                session.add(model)
        except IntegrityError as e:
            raise EmailAlreadyExistsError(user.email) from e

        logger.info("Created user: %s (email: %s)", user.id, user.email)
        return user

    async def update(self, user_id: UUID, **changes: Any) -> User | None:
        unknown = set(changes) - self.UPDATABLE_FIELDS
        if unknown:
            msg = f"Cannot update user fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        values = dict(changes)
        if isinstance(values.get("role"), UserRole):
            values["role"] = values["role"].value
        values["updated_at"] = utc_now()

        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(**values)
            .returning(UserModel)
            .execution_options(synchronize_session=False)
        )
        try:
            user = await self._execute_returning(stmt)
        except IntegrityError as e:
            raise EmailAlreadyExistsError(str(changes.get("email", ""))) from e

        if user is not None:
            logger.debug("Updated user %s: %s", user_id, sorted(changes))
        return user

    async def increment_failed_attempts(
        self,
        user_id: UUID,
        *,
        lock_threshold: int,
        locked_until: datetime,
    ) -> User | None:
        new_count = UserModel.failed_login_attempts + 1
        reaches_threshold = new_count >= lock_threshold

        # One statement; SET expressions see the pre-update row.
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                failed_login_attempts=new_count,
                is_locked=case(
                    (reaches_threshold, true()),
                    else_=UserModel.is_locked,
                ),
                locked_until=case(
                    (
                        reaches_threshold,
                        literal(locked_until, UserModel.locked_until.type),
                    ),
                    else_=UserModel.locked_until,
                ),
                updated_at=utc_now(),
            )
            .returning(UserModel)
            .execution_options(synchronize_session=False)
        )
        user = await self._execute_returning(stmt)

        if user is not None and user.is_locked and user.failed_login_attempts >= lock_threshold:
            logger.warning(
                "Account locked for user %s due to %d failed attempts",
                user_id,
                user.failed_login_attempts,
            )
        return user

    async def reset_failed_attempts(self, user_id: UUID) -> User | None:
        return await self.update(
            user_id,
            failed_login_attempts=0,
            is_locked=False,
            locked_until=None,
        )

    async def count(self) -> int:
        stmt = select(func.count()).select_from(UserModel)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def _execute_returning(self, stmt) -> User | None:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return self._map_to_domain(model) if model else None

    def _map_to_domain(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            display_name=model.display_name,
            role=UserRole(model.role),
            is_active=model.is_active,
            is_locked=model.is_locked,
            failed_login_attempts=model.failed_login_attempts,
            locked_until=_aware(model.locked_until),
            last_login_at=_aware(model.last_login_at),
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email,
            password_hash=user.password_hash,
            display_name=user.display_name,
            role=user.role.value,
            is_active=user.is_active,
            is_locked=user.is_locked,
            failed_login_attempts=user.failed_login_attempts,
            locked_until=user.locked_until,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


def _aware(value: datetime | None) -> datetime | None:
    return ensure_tz_aware(value) if value is not None else None
