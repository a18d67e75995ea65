"""SQLAlchemy implementation for smarttask_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- UserModel / SessionModel: SQLAlchemy models
- UserRepositorySQLAlchemy / SessionRepositorySQLAlchemy: store implementations
- build_engine / create_session_maker / create_tables: database helpers

Note: The consuming application should include IdentityBase.metadata
in its Alembic migrations to create the users and sessions tables.
"""

from smarttask_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from smarttask_identity.infrastructure.persistence.sqlalchemy.database import (
    build_engine,
    create_session_maker,
    create_tables,
    drop_tables,
)
from smarttask_identity.infrastructure.persistence.sqlalchemy.models import (
    SessionModel,
    UserModel,
)
from smarttask_identity.infrastructure.persistence.sqlalchemy.repositories import (
    SessionRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "IdentityBase",
    "SessionModel",
    "SessionRepositorySQLAlchemy",
    "UserModel",
    "UserRepositorySQLAlchemy",
    "build_engine",
    "create_session_maker",
    "create_tables",
    "drop_tables",
]
