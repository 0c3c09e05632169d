"""User domain manages user identity only.

This domain handles:
- User aggregate (identity: id, email, name, password hash, verification)
- Email change bookkeeping (pending email)
"""

from nexus_identity.domain.user.aggregates import User
from nexus_identity.domain.user.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    UserNotFoundError,
)
from nexus_identity.domain.user.repositories import UserRepository
from nexus_identity.domain.user.value_objects import Email

__all__ = [
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "User",
    "UserNotFoundError",
    "UserRepository",
]
