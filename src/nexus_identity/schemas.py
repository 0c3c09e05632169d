"""Identity schemas and data structures.

These are simple data classes used for transferring identity
data between components.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class TokenPurpose(str, Enum):
    """What a bearer token may be used for. Carried in the ``purpose`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    This represents the data extracted from a verified JWT token.

    Attributes
    ----------
    user_id
        The unique identifier of the user
    email
        The user's email address at issuance time
    exp
        Token expiration timestamp
    purpose
        Access or refresh
    token_id
        The ``jti`` claim; unique per issued token
    """

    user_id: UUID
    email: str
    exp: datetime
    purpose: TokenPurpose
    token_id: str

    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return datetime.now(tz=self.exp.tzinfo) > self.exp

    def is_access_token(self) -> bool:
        return self.purpose is TokenPurpose.ACCESS

    def is_refresh_token(self) -> bool:
        return self.purpose is TokenPurpose.REFRESH


@dataclass(frozen=True)
class TokenPair:
    """An access token together with the refresh token issued alongside it."""

    access_token: str
    refresh_token: str
