"""Database initialization and maintenance commands."""

import asyncio
import logging
import sys

from smarttask_config.settings import get_settings
from smarttask_identity.domain.shared.time import utc_now
from smarttask_identity.infrastructure.persistence.sqlalchemy.database import (
    build_engine,
    create_session_maker,
    create_tables,
    drop_tables,
)
from smarttask_identity.infrastructure.persistence.sqlalchemy.repositories import (
    SessionRepositorySQLAlchemy,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _get_engine():
    """Get the database engine for maintenance commands."""
    settings = get_settings()
    return build_engine(settings.database_url, echo=False)


def _display_url(database_url: str) -> str:
    """Strip credentials from a database URL for printing."""
    return database_url.split("@")[-1] if "@" in database_url else database_url


async def _init_database() -> None:
    """Initialize the database and create all identity tables."""
    settings = get_settings()

    logger.info("Initializing database...")
    logger.info("Database URL: %s", _display_url(settings.database_url))

    engine = _get_engine()
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()

    logger.info("Database initialized successfully!")


async def _reset_database(force: bool = False) -> None:
    """Drop all identity tables and recreate them (USE WITH CAUTION!)."""
    settings = get_settings()

    print(f"Database: {_display_url(settings.database_url)}")
    print()

    if not force:
        print("WARNING: This will DELETE ALL USERS AND SESSIONS in the database!")
        print()
        response = input("Type 'yes' to confirm: ")
        if response.lower() != "yes":
            print("Aborted.")
            sys.exit(1)
        print()

    engine = _get_engine()
    try:
        logger.info("Dropping all tables...")
        await drop_tables(engine)

        logger.info("Creating all tables...")
        await create_tables(engine)
    finally:
        await engine.dispose()

    logger.info("Database recreated successfully!")


async def _sweep_sessions() -> int:
    """Delete every session whose expiry has passed."""
    engine = _get_engine()
    try:
        repository = SessionRepositorySQLAlchemy(create_session_maker(engine))
        deleted = await repository.delete_expired(utc_now())
    finally:
        await engine.dispose()

    logger.info("Deleted %d expired sessions", deleted)
    return deleted


def db_init():
    """Initialize database (create tables)."""
    asyncio.run(_init_database())


def db_reset():
    """Drop and recreate all identity tables."""
    force = "--force" in sys.argv or "-f" in sys.argv
    asyncio.run(_reset_database(force=force))


def sweep_sessions():
    """Delete expired sessions; meant to run from cron or a timer."""
    asyncio.run(_sweep_sessions())
