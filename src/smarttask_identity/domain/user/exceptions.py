"""User store exceptions.

Raised by ``UserRepository`` implementations; the application layer
translates them into the public error taxonomy.
"""

from smarttask_identity.exceptions import InvalidEmailError


class EmailAlreadyExistsError(Exception):
    """Email already registered (uniqueness constraint hit)."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email already registered: {email}")


__all__ = ["EmailAlreadyExistsError", "InvalidEmailError"]
