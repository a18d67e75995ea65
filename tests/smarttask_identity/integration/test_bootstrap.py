"""Tests for the composition root and maintenance commands."""

import logging

import pytest

from smarttask_config import clear_settings_cache
from smarttask_identity import bootstrap
from smarttask_identity.application.services import AuthenticationService
from smarttask_identity.infrastructure.persistence.sqlalchemy import init_db


@pytest.fixture
def fresh_caches(monkeypatch):
    """Cheap hashing and no cached engine or service."""
    monkeypatch.setenv("PASSWORD_HASH_MEMORY_COST_KIB", "8192")
    monkeypatch.setenv("PASSWORD_HASH_TIME_COST", "1")
    clear_settings_cache()
    bootstrap.clear_caches()
    yield
    bootstrap.clear_caches()


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    own_level = logging.getLogger("smarttask_identity").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("smarttask_identity").setLevel(own_level)


class TestConfigureLogging:
    def test_sets_levels_from_settings(self, monkeypatch, restore_logging):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        bootstrap.configure_logging()

        assert logging.getLogger("smarttask_identity").level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


class TestGetAuthenticationService:
    def test_returns_single_shared_instance(self, fresh_caches):
        service = bootstrap.get_authentication_service()

        assert isinstance(service, AuthenticationService)
        assert bootstrap.get_authentication_service() is service
        assert bootstrap.get_session_maker() is bootstrap.get_session_maker()


@pytest.mark.integration
class TestMaintenanceCommands:
    @pytest.mark.asyncio
    async def test_init_register_and_sweep_on_file_database(
        self,
        monkeypatch,
        tmp_path,
        fresh_caches,
    ):
        db_file = tmp_path / "data" / "identity.db"
        monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_file}")
        clear_settings_cache()

        await init_db._init_database()
        assert db_file.exists()

        service = bootstrap.get_authentication_service()
        result = await service.register("a@x.com", "Aa1!aaaa")
        assert result.session.refresh_token

        assert await init_db._sweep_sessions() == 0

        await bootstrap.get_engine().dispose()
