"""Unit tests for the User record."""

from dataclasses import FrozenInstanceError, replace
from datetime import datetime, timedelta, timezone

import pytest

from smarttask_identity.domain.user import (
    MAX_DISPLAY_NAME_LENGTH,
    Email,
    InvalidEmailError,
    User,
    UserRole,
)
from smarttask_identity.exceptions import InvalidDisplayNameError

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


class TestUserCreate:
    def test_create_normalizes_email(self):
        user = User.create("Test@Example.com", "hash")

        assert user.email == "test@example.com"
        assert user.role == UserRole.USER
        assert user.is_active
        assert not user.is_locked
        assert user.failed_login_attempts == 0

    def test_create_accepts_email_object(self):
        user = User.create(Email("a@x.com"), "hash", display_name="Alice")

        assert user.email == "a@x.com"
        assert user.display_name == "Alice"

    def test_create_rejects_invalid_email(self):
        with pytest.raises(InvalidEmailError):
            User.create("nope", "hash")

    def test_create_accepts_display_name_at_limit(self):
        name = "n" * MAX_DISPLAY_NAME_LENGTH

        assert User.create("a@x.com", "hash", display_name=name).display_name == name

    def test_create_rejects_overlong_display_name(self):
        with pytest.raises(InvalidDisplayNameError, match="at most 100"):
            User.create("a@x.com", "hash", display_name="n" * (MAX_DISPLAY_NAME_LENGTH + 1))

    def test_user_is_immutable(self):
        user = User.create("a@x.com", "hash")

        with pytest.raises(FrozenInstanceError):
            user.failed_login_attempts = 3  # type: ignore[misc]

    def test_repr_hides_password_hash(self):
        user = User.create("a@x.com", "argon2-hash-value")

        assert "argon2-hash-value" not in repr(user)


class TestUserLock:
    def test_lock_active_before_deadline(self):
        user = replace(
            User.create("a@x.com", "hash"),
            is_locked=True,
            locked_until=NOW + timedelta(minutes=1),
        )

        assert user.is_lock_active(NOW)

    def test_lock_inactive_after_deadline(self):
        user = replace(
            User.create("a@x.com", "hash"),
            is_locked=True,
            locked_until=NOW - timedelta(seconds=1),
        )

        assert not user.is_lock_active(NOW)

    def test_unlocked_user_never_lock_active(self):
        user = User.create("a@x.com", "hash")

        assert not user.is_lock_active(NOW)
