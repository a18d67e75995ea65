"""Composition root for the identity engine.

Provides:
- configure_logging: process-wide log setup
- build_authentication_service: wires a service from explicit parts
- get_authentication_service: the shared instance for this process
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import TYPE_CHECKING

from smarttask_config.settings import Settings, get_settings
from smarttask_identity.application.policies import LockoutPolicy
from smarttask_identity.application.services import (
    AuthenticationService,
    SessionManager,
)
from smarttask_identity.domain.shared.time import Clock, utc_now
from smarttask_identity.infrastructure.audit import LoggingAuditSink
from smarttask_identity.infrastructure.persistence.sqlalchemy import (
    SessionRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
    build_engine,
    create_session_maker,
)
from smarttask_identity.services import JWTService, PasswordHashingService

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

    from smarttask_identity.services import AuditSink

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure application logging.

    Sets up console output with timestamps and module names, the configured
    level for our own packages, and WARNING for noisy third-party libraries.
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    logging.getLogger("smarttask_identity").setLevel(log_level)
    logging.getLogger("smarttask_config").setLevel(log_level)
    logging.getLogger(settings.audit_log_name).setLevel(logging.INFO)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def build_authentication_service(  # noqa: PLR0913
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    *,
    audit_sink: AuditSink | None = None,
    password_service: PasswordHashingService | None = None,
    clock: Clock = utc_now,
) -> AuthenticationService:
    """Wire an AuthenticationService from settings and a session factory."""
    audit_sink = audit_sink or LoggingAuditSink(settings.audit_log_name, clock=clock)
    user_repository = UserRepositorySQLAlchemy(session_factory)
    session_repository = SessionRepositorySQLAlchemy(session_factory)

    session_manager = SessionManager(
        session_repository,
        user_repository,
        audit_sink,
        session_lifetime=settings.session_expire,
        rotate_refresh_tokens=settings.rotate_refresh_tokens,
        clock=clock,
    )
    password_service = password_service or PasswordHashingService(
        memory_cost_kib=settings.password_hash_memory_cost_kib,
        time_cost=settings.password_hash_time_cost,
        parallelism=settings.password_hash_parallelism,
    )
    jwt_service = JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )
    lockout_policy = LockoutPolicy(
        max_failed_attempts=settings.max_failed_login_attempts,
        lockout_duration=settings.account_lockout,
    )

    return AuthenticationService(
        user_repository=user_repository,
        session_manager=session_manager,
        password_service=password_service,
        jwt_service=jwt_service,
        audit_sink=audit_sink,
        lockout_policy=lockout_policy,
        clock=clock,
    )


@lru_cache()
def get_engine() -> AsyncEngine:
    settings = get_settings()
    return build_engine(settings.database_url, echo=settings.database_echo)


@lru_cache()
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return create_session_maker(get_engine())


@lru_cache()
def get_authentication_service() -> AuthenticationService:
    """Return the process-wide AuthenticationService."""
    settings = get_settings()
    logger.info(
        "Building authentication service (database=%s, rotation=%s)",
        settings.database_type,
        settings.rotate_refresh_tokens,
    )
    return build_authentication_service(settings, get_session_maker())


def clear_caches() -> None:
    """Forget the cached engine and service (tests, settings reload)."""
    get_authentication_service.cache_clear()
    get_session_maker.cache_clear()
    get_engine.cache_clear()
