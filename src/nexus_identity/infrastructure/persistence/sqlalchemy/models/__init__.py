"""SQLAlchemy models for identity persistence."""

from nexus_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    UserModel,
)

__all__ = ["UserModel"]
