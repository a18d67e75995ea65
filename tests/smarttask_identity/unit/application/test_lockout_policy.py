"""Unit tests for LockoutPolicy."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from smarttask_identity.application.policies import LockoutPolicy
from smarttask_identity.domain.user import User

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def user() -> User:
    return User.create("a@x.com", "hash")


class TestLockoutPolicy:
    def test_defaults(self):
        policy = LockoutPolicy()

        assert policy.max_failed_attempts == 5
        assert policy.lockout_duration == timedelta(minutes=15)

    @pytest.mark.parametrize(("attempts", "expected"), [(0, False), (4, False), (5, True), (6, True)])
    def test_should_lock_at_threshold(self, attempts, expected):
        assert LockoutPolicy().should_lock(attempts) is expected

    def test_lock_deadline(self):
        assert LockoutPolicy().lock_deadline(NOW) == NOW + timedelta(minutes=15)

    def test_locked_out_while_deadline_in_future(self, user):
        locked = replace(user, is_locked=True, locked_until=NOW + timedelta(minutes=5))
        policy = LockoutPolicy()

        assert policy.is_locked_out(locked, NOW)
        assert not policy.lock_expired(locked, NOW)

    def test_lock_expired_after_deadline(self, user):
        locked = replace(user, is_locked=True, locked_until=NOW - timedelta(seconds=1))
        policy = LockoutPolicy()

        assert not policy.is_locked_out(locked, NOW)
        assert policy.lock_expired(locked, NOW)

    def test_unlocked_user(self, user):
        policy = LockoutPolicy()

        assert not policy.is_locked_out(user, NOW)
        assert not policy.lock_expired(user, NOW)

    def test_remaining_attempts(self, user):
        policy = LockoutPolicy(max_failed_attempts=3)

        assert policy.remaining_attempts(user) == 3
        assert policy.remaining_attempts(replace(user, failed_login_attempts=5)) == 0

    def test_rejects_invalid_configuration(self):
        with pytest.raises(ValueError, match="at least 1"):
            LockoutPolicy(max_failed_attempts=0)
        with pytest.raises(ValueError, match="positive"):
            LockoutPolicy(lockout_duration=timedelta(0))
