"""Session domain: refresh sessions and their store interface."""

from smarttask_identity.domain.session.entities import Session, SessionState
from smarttask_identity.domain.session.repositories import SessionRepository

__all__ = ["Session", "SessionRepository", "SessionState"]
