"""Identity services.

Provides password hashing, JWT token management and the audit sink
interface.
"""

from smarttask_identity.services.audit import AuditEvent, AuditSink
from smarttask_identity.services.jwt_service import JWTService
from smarttask_identity.services.password_service import PasswordHashingService

__all__ = [
    "AuditEvent",
    "AuditSink",
    "JWTService",
    "PasswordHashingService",
]
