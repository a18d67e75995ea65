from smarttask_identity.infrastructure.persistence.sqlalchemy.repositories.session_repository import (
    SessionRepositorySQLAlchemy,
)
from smarttask_identity.infrastructure.persistence.sqlalchemy.repositories.user_repository import (
    UserRepositorySQLAlchemy,
)

__all__ = ["SessionRepositorySQLAlchemy", "UserRepositorySQLAlchemy"]
