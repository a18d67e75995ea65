from smarttask_identity.infrastructure.persistence.sqlalchemy.models.session_model import (
    SessionModel,
)
from smarttask_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    UserModel,
)

__all__ = ["SessionModel", "UserModel"]
