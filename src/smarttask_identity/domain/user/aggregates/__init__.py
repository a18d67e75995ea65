from smarttask_identity.domain.user.aggregates.user import (
    MAX_DISPLAY_NAME_LENGTH,
    User,
    check_display_name,
)

__all__ = ["MAX_DISPLAY_NAME_LENGTH", "User", "check_display_name"]
