"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nexus_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    UserRepository,
)
from nexus_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        stmt = select(UserModel).where(UserModel.email == Email.normalize(email))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_pending_email(self, email: Union[str, Email]) -> User | None:
        stmt = (
            select(UserModel)
            .where(UserModel.pending_email == Email.normalize(email))
            .order_by(UserModel.updated_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        user = await self.find_by_email(email)
        return user is not None

    async def create(self, user: User) -> None:
        self._session.add(self._map_to_model(user))
        await self._flush(user)
        logger.info("Created user: %s (email: %s)", user.id, user.email)

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        if existing:
            self._update_model(existing, user)
            logger.debug("Updated user: %s", user.id)
        else:
            self._session.add(self._map_to_model(user))
            logger.info("Created user: %s (email: %s)", user.id, user.email)

        await self._flush(user)

    async def delete(self, user_id: UUID) -> None:
        model = await self._find_model_by_id(user_id)

        if model:
            await self._session.delete(model)
            await self._session.flush()
            logger.info("Deleted user: %s", user_id)

    async def _flush(self, user: User) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            if "UNIQUE constraint failed" in str(e) or "unique" in str(e).lower():
                raise EmailAlreadyExistsError(user.email) from e
            raise

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            name=model.name,
            is_email_verified=model.is_email_verified,
            email_verified_at=model.email_verified_at,
            pending_email=model.pending_email,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email,
            password_hash=user.password_hash,
            name=user.name,
            is_email_verified=user.is_email_verified,
            email_verified_at=user.email_verified_at,
            pending_email=user.pending_email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _update_model(self, model: UserModel, user: User) -> None:
        model.email = user.email
        model.password_hash = user.password_hash
        model.name = user.name
        model.is_email_verified = user.is_email_verified
        model.email_verified_at = user.email_verified_at
        model.pending_email = user.pending_email
        model.updated_at = user.updated_at
