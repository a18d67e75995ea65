"""User record for identity concerns only."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from smarttask_identity.domain.shared.time import utc_now
from smarttask_identity.domain.user.value_objects import Email, UserRole
from smarttask_identity.exceptions import InvalidDisplayNameError

MAX_DISPLAY_NAME_LENGTH = 100


def check_display_name(display_name: str | None) -> str | None:
    """Return ``display_name`` unchanged if it fits the user record."""
    if display_name is not None and len(display_name) > MAX_DISPLAY_NAME_LENGTH:
        msg = f"Display name must be at most {MAX_DISPLAY_NAME_LENGTH} characters"
        raise InvalidDisplayNameError(msg)
    return display_name


@dataclass(frozen=True)
class User:
    """
    Immutable user record.

    Instances are never mutated; repositories return a fresh ``User`` for
    every state change (failed attempt, unlock, password change, ...).

    ``is_locked`` implies ``locked_until`` is set. A lock whose deadline has
    passed stays recorded until the next login attempt clears it.
    """

    email: str
    password_hash: str
    id: UUID = field(default_factory=uuid4)
    display_name: str | None = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    is_locked: bool = False
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    last_login_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def is_lock_active(self, now: datetime) -> bool:
        """True while the lock deadline lies in the future."""
        return (
            self.is_locked
            and self.locked_until is not None
            and self.locked_until > now
        )

    @classmethod
    def create(
        cls,
        email: str | Email,
        password_hash: str,
        display_name: str | None = None,
        role: UserRole = UserRole.USER,
    ) -> User:
        email_obj = email if isinstance(email, Email) else Email(email)
        now = utc_now()
        return cls(
            email=email_obj.value,
            password_hash=password_hash,
            display_name=check_display_name(display_name),
            role=role,
            created_at=now,
            updated_at=now,
        )

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"
