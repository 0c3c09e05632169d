"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from nexus_identity.domain.user.aggregates.user import User
from nexus_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Repository interface for User aggregates."""

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their (case-insensitive) email address."""

    @abstractmethod
    async def find_by_pending_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find the user who has requested a change to this email address."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def create(self, user: User) -> None:
        """Insert a new user.

        Raises
        ------
        EmailAlreadyExistsError
            If another user already owns the email
        """

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save or update a user."""

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Delete a user by ID."""
