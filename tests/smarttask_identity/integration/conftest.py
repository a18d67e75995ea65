"""
Pytest configuration for smarttask_identity integration tests.

Integration tests run against real stores on a fresh in-memory SQLite
database per test. Import the shared fixtures to make them available.
"""

from tests.shared.fixtures.database import (
    async_engine,
    session_factory,
)

__all__ = [
    "async_engine",
    "session_factory",
]
