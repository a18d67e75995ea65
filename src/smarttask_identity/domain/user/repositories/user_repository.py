"""User repository interface (the credential store)."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Union
from uuid import UUID

from smarttask_identity.domain.user.aggregates.user import User
from smarttask_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """
    Repository interface for User records.

    Implementations must enforce case-insensitive email uniqueness at the
    storage level and raise ``EmailAlreadyExistsError`` when it is violated,
    and must apply ``increment_failed_attempts`` as one atomic update so that
    concurrent failures are never undercounted.
    """

    UPDATABLE_FIELDS = frozenset(
        {
            "email",
            "password_hash",
            "display_name",
            "role",
            "is_active",
            "is_locked",
            "failed_login_attempts",
            "locked_until",
            "last_login_at",
        },
    )

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        """Find a user by their (normalized) email address."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user.

        Raises
        ------
        EmailAlreadyExistsError
            If the email is already registered
        """

    @abstractmethod
    async def update(self, user_id: UUID, **changes: Any) -> User | None:
        """Atomically patch the given fields and return the new state.

        Only names in ``UPDATABLE_FIELDS`` are accepted; ``updated_at`` is
        stamped automatically.

        Returns
        -------
        The updated user, or None if no user has this ID

        Raises
        ------
        EmailAlreadyExistsError
            If an email change collides with another user
        """

    @abstractmethod
    async def increment_failed_attempts(
        self,
        user_id: UUID,
        *,
        lock_threshold: int,
        locked_until: datetime,
    ) -> User | None:
        """Atomically add one failed attempt.

        When the new count reaches ``lock_threshold`` the same update sets
        ``is_locked`` and ``locked_until``.

        Returns
        -------
        The updated user, or None if no user has this ID
        """

    @abstractmethod
    async def reset_failed_attempts(self, user_id: UUID) -> User | None:
        """Clear failed attempts and any lock state in one update."""

    @abstractmethod
    async def count(self) -> int:
        """Count total users."""
