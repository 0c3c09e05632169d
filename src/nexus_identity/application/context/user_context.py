"""User context for request-scoped user identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from nexus_identity.schemas import TokenPayload


@dataclass(frozen=True)
class UserContext:
    """Identity of the caller as asserted by a verified access token.

    Built without a user store lookup; handlers that need the current
    record load it explicitly.
    """

    user_id: UUID
    email: str

    @classmethod
    def from_token(cls, payload: TokenPayload) -> UserContext:
        return cls(user_id=payload.user_id, email=payload.email)

    def __str__(self) -> str:
        return f"UserContext({self.email})"
