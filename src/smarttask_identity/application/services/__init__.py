from smarttask_identity.application.services.authentication_service import (
    AuthenticationService,
)
from smarttask_identity.application.services.session_manager import (
    RotationResult,
    SessionManager,
)

__all__ = [
    "AuthenticationService",
    "RotationResult",
    "SessionManager",
]
