"""User domain manages user identity only.

This domain handles:
- User record (identity, password hash, lockout state)
- Email normalization and validation
- The store interface user records live behind
"""

from smarttask_identity.domain.user.aggregates import (
    MAX_DISPLAY_NAME_LENGTH,
    User,
    check_display_name,
)
from smarttask_identity.domain.user.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
)
from smarttask_identity.domain.user.repositories import UserRepository
from smarttask_identity.domain.user.value_objects import (
    Email,
    UserRole,
)

__all__ = [
    "MAX_DISPLAY_NAME_LENGTH",
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "User",
    "UserRepository",
    "UserRole",
    "check_display_name",
]
