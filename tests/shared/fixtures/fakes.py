"""In-memory doubles for collaborators of the identity services."""

from dataclasses import dataclass
from typing import Union
from uuid import UUID

from nexus_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    UserRepository,
)
from nexus_identity.infrastructure.email import EmailPurpose


def _copy(user: User) -> User:
    return User.reconstitute(
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


class InMemoryUserRepository(UserRepository):
    """UserRepository keeping detached copies, like a real store would."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}

    def _by_email(self, email: str) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def find_by_id(self, user_id: UUID) -> User | None:
        user = self._users.get(user_id)
        return _copy(user) if user else None

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        user = self._by_email(Email.normalize(email))
        return _copy(user) if user else None

    async def find_by_pending_email(self, email: Union[str, Email]) -> User | None:
        normalized = Email.normalize(email)
        for user in self._users.values():
            if user.pending_email == normalized:
                return _copy(user)
        return None

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        return self._by_email(Email.normalize(email)) is not None

    async def create(self, user: User) -> None:
        if self._by_email(user.email) is not None:
            raise EmailAlreadyExistsError(user.email)
        self._users[user.id] = _copy(user)

    async def save(self, user: User) -> None:
        owner = self._by_email(user.email)
        if owner is not None and owner.id != user.id:
            raise EmailAlreadyExistsError(user.email)
        self._users[user.id] = _copy(user)

    async def delete(self, user_id: UUID) -> None:
        self._users.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._users)


@dataclass(frozen=True)
class SentEmail:
    to_email: str
    code: str
    purpose: EmailPurpose
    expiry_minutes: int


class RecordingEmailService:
    """Stands in for EmailService and keeps every code it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[SentEmail] = []
        self.fail_with: Exception | None = None

    async def send_otp_email(
        self,
        to_email: str,
        code: str,
        purpose: EmailPurpose,
        expiry_minutes: int = 10,
    ) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(SentEmail(to_email, code, purpose, expiry_minutes))

    def last_code(self, to_email: str) -> str:
        for email in reversed(self.sent):
            if email.to_email == to_email:
                return email.code
        msg = f"No email was sent to {to_email}"
        raise AssertionError(msg)

    def sent_to(self, to_email: str) -> list[SentEmail]:
        return [email for email in self.sent if email.to_email == to_email]


def wrong_code(code: str) -> str:
    """A code of the same shape that is guaranteed to differ from ``code``."""
    return "0" * len(code) if code != "0" * len(code) else "1" * len(code)


class FakeClock:
    """Monotonic clock stand-in for MemoryEphemeralStore that tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
