from smarttask_identity.domain.session.repositories.session_repository import (
    SessionRepository,
)

__all__ = ["SessionRepository"]
