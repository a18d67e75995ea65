from enum import Enum


class UserRole(str, Enum):
    """User roles; the only authorization decision is admin or not."""

    USER = "user"
    ADMIN = "admin"
