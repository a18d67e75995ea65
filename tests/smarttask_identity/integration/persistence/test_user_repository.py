"""Integration tests for UserRepositorySQLAlchemy on SQLite."""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from smarttask_identity.domain.user import EmailAlreadyExistsError, User, UserRole
from smarttask_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)
from tests.shared.fixtures.database import TEST_USER_EMAIL, TEST_USER_EMAIL_2

LOCK_DEADLINE = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def user_repo(session_factory):
    """Create UserRepository instance with the test session factory."""
    return UserRepositorySQLAlchemy(session_factory)


@pytest.mark.integration
class TestUserRepositorySQLAlchemy:
    """Integration tests for UserRepositorySQLAlchemy."""

    @pytest.mark.asyncio
    async def test_create_and_find_by_id(self, user_repo):
        user = User.create(TEST_USER_EMAIL, "hash", display_name="Tester")

        await user_repo.create(user)
        found = await user_repo.find_by_id(user.id)

        assert found is not None
        assert isinstance(found.id, UUID)
        assert found.email == TEST_USER_EMAIL
        assert found.display_name == "Tester"
        assert found.role == UserRole.USER
        assert found.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_find_by_id_not_found(self, user_repo):
        assert await user_repo.find_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_find_by_email_case_insensitive(self, user_repo):
        await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))

        found = await user_repo.find_by_email("TEST@EXAMPLE.COM")

        assert found is not None
        assert found.email == TEST_USER_EMAIL

    @pytest.mark.asyncio
    async def test_exists_by_email(self, user_repo):
        await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))

        assert await user_repo.exists_by_email(TEST_USER_EMAIL) is True
        assert await user_repo.exists_by_email("nonexistent@example.com") is False

    @pytest.mark.asyncio
    async def test_create_duplicate_email_raises(self, user_repo):
        await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))

        with pytest.raises(EmailAlreadyExistsError):
            await user_repo.create(User.create("Test@Example.com", "other"))

        assert await user_repo.count() == 1

    @pytest.mark.asyncio
    async def test_update_returns_new_state(self, user_repo):
        user = await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))

        updated = await user_repo.update(user.id, display_name="Renamed", role=UserRole.ADMIN)

        assert updated is not None
        assert updated.display_name == "Renamed"
        assert updated.is_admin
        assert updated.password_hash == "hash"

    @pytest.mark.asyncio
    async def test_update_unknown_user_returns_none(self, user_repo):
        assert await user_repo.update(uuid4(), display_name="x") is None

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_fields(self, user_repo):
        user = await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))

        with pytest.raises(ValueError, match="id"):
            await user_repo.update(user.id, id=uuid4())

    @pytest.mark.asyncio
    async def test_update_to_taken_email_raises(self, user_repo):
        await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))
        other = await user_repo.create(User.create(TEST_USER_EMAIL_2, "hash"))

        with pytest.raises(EmailAlreadyExistsError):
            await user_repo.update(other.id, email=TEST_USER_EMAIL)

    @pytest.mark.asyncio
    async def test_increment_failed_attempts_below_threshold(self, user_repo):
        user = await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))

        updated = await user_repo.increment_failed_attempts(
            user.id,
            lock_threshold=5,
            locked_until=LOCK_DEADLINE,
        )

        assert updated.failed_login_attempts == 1
        assert updated.is_locked is False
        assert updated.locked_until is None

    @pytest.mark.asyncio
    async def test_increment_failed_attempts_locks_at_threshold(self, user_repo):
        user = await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))

        for _ in range(4):
            await user_repo.increment_failed_attempts(
                user.id,
                lock_threshold=5,
                locked_until=LOCK_DEADLINE,
            )
        locked = await user_repo.increment_failed_attempts(
            user.id,
            lock_threshold=5,
            locked_until=LOCK_DEADLINE,
        )

        assert locked.failed_login_attempts == 5
        assert locked.is_locked is True
        assert locked.locked_until == LOCK_DEADLINE

    @pytest.mark.asyncio
    async def test_increment_keeps_existing_deadline_below_threshold(self, user_repo):
        user = await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))
        await user_repo.update(user.id, is_locked=True, locked_until=LOCK_DEADLINE)

        updated = await user_repo.increment_failed_attempts(
            user.id,
            lock_threshold=5,
            locked_until=LOCK_DEADLINE + timedelta(days=1),
        )

        assert updated.locked_until == LOCK_DEADLINE

    @pytest.mark.asyncio
    async def test_increment_failed_attempts_unknown_user(self, user_repo):
        assert (
            await user_repo.increment_failed_attempts(
                uuid4(),
                lock_threshold=5,
                locked_until=LOCK_DEADLINE,
            )
            is None
        )

    @pytest.mark.asyncio
    async def test_reset_failed_attempts_clears_lock(self, user_repo):
        user = await user_repo.create(User.create(TEST_USER_EMAIL, "hash"))
        await user_repo.update(
            user.id,
            failed_login_attempts=5,
            is_locked=True,
            locked_until=LOCK_DEADLINE,
        )

        reset = await user_repo.reset_failed_attempts(user.id)

        assert reset.failed_login_attempts == 0
        assert reset.is_locked is False
        assert reset.locked_until is None
