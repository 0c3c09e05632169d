"""User aggregate for identity concerns only."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from nexus.domain.shared.exceptions import ValidationError
from nexus.domain.shared.time import utc_now
from nexus_identity.domain.user.value_objects.email import Email


class User:
    """
    User aggregate root.

    A persisted user always has a verified email: unverified sign-ups live
    in the registration staging area until their code is confirmed. An
    email change in progress is tracked through ``pending_email``.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        password_hash: str,
        name: str,
        id: UUID | None = None,
        is_email_verified: bool = False,
        email_verified_at: datetime | None = None,
        pending_email: Union[str, Email, None] = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash
        self._name = self._validate_name(name)
        self._id = id or uuid4()
        self._is_email_verified = is_email_verified
        self._email_verified_at = email_verified_at
        self._pending_email = (
            Email.normalize(pending_email) if pending_email is not None else None
        )
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @staticmethod
    def _validate_name(name: str) -> str:
        stripped = (name or "").strip()
        if not stripped:
            msg = "Name cannot be empty"
            raise ValidationError(msg)
        return stripped

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_email_verified(self) -> bool:
        return self._is_email_verified

    @property
    def email_verified_at(self) -> datetime | None:
        return self._email_verified_at

    @property
    def pending_email(self) -> str | None:
        return self._pending_email

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def _touch(self) -> None:
        self._updated_at = utc_now()

    def change_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash
        self._touch()

    def rename(self, name: str) -> None:
        self._name = self._validate_name(name)
        self._touch()

    def request_email_change(self, new_email: Union[str, Email]) -> None:
        self._pending_email = Email.normalize(new_email)
        self._touch()

    def cancel_email_change(self) -> None:
        self._pending_email = None
        self._touch()

    def confirm_email_change(self) -> None:
        """Switch to the pending email and mark it verified."""
        if self._pending_email is None:
            msg = "No email change is pending"
            raise ValidationError(msg)
        now = utc_now()
        self._email = Email(self._pending_email)
        self._pending_email = None
        self._is_email_verified = True
        self._email_verified_at = now
        self._updated_at = now

    @classmethod
    def create_verified(
        cls,
        email: Union[str, Email],
        password_hash: str,
        name: str,
    ) -> "User":
        """Create a user whose email ownership has just been proven."""
        now = utc_now()
        return cls(
            email=email,
            password_hash=password_hash,
            name=name,
            is_email_verified=True,
            email_verified_at=now,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        email: Union[str, Email],
        password_hash: str,
        name: str,
        is_email_verified: bool,
        email_verified_at: datetime | None,
        pending_email: str | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            email=email,
            password_hash=password_hash,
            name=name,
            is_email_verified=is_email_verified,
            email_verified_at=email_verified_at,
            pending_email=pending_email,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
