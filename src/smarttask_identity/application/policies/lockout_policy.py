"""Login lockout policy."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from smarttask_identity.domain.user import User


@dataclass(frozen=True)
class LockoutPolicy:
    """Temporary lockout after repeated failed logins.

    After ``max_failed_attempts`` consecutive failures the account is locked
    for ``lockout_duration``. The attempt that triggers the lock is still
    answered with invalid credentials; only the next attempt sees the lock.
    """

    max_failed_attempts: int = 5
    lockout_duration: timedelta = timedelta(minutes=15)

    def __post_init__(self) -> None:
        if self.max_failed_attempts < 1:
            msg = "max_failed_attempts must be at least 1"
            raise ValueError(msg)
        if self.lockout_duration <= timedelta(0):
            msg = "lockout_duration must be positive"
            raise ValueError(msg)

    def should_lock(self, failed_attempts: int) -> bool:
        return failed_attempts >= self.max_failed_attempts

    def lock_deadline(self, now: datetime) -> datetime:
        return now + self.lockout_duration

    def is_locked_out(self, user: User, now: datetime) -> bool:
        """The lock is recorded and its deadline lies in the future."""
        return user.is_lock_active(now)

    def lock_expired(self, user: User, now: datetime) -> bool:
        """The lock is recorded but its deadline has passed."""
        return user.is_locked and not user.is_lock_active(now)

    def remaining_attempts(self, user: User) -> int:
        return max(self.max_failed_attempts - user.failed_login_attempts, 0)
