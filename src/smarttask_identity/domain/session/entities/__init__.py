from smarttask_identity.domain.session.entities.session import Session, SessionState

__all__ = ["Session", "SessionState"]
