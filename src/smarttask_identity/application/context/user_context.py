"""User context for an authenticated caller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from smarttask_identity.schemas import TokenPayload


@dataclass(frozen=True)
class UserContext:
    """Immutable identity of the caller behind a valid access token."""

    user_id: UUID
    email: str

    @classmethod
    def from_token(cls, payload: TokenPayload) -> UserContext:
        return cls(user_id=payload.user_id, email=payload.email)

    def __str__(self) -> str:
        return f"UserContext({self.email})"
