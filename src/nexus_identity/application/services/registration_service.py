"""Staging area for registrations that have not proven email ownership.

A sign-up is held in the ephemeral store (hashed password included) until
its verification code is confirmed. Nothing is written to the user table
before that, so an unverified address never blocks or owns an account.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from nexus.domain.shared.exceptions import ValidationError
from nexus.domain.shared.time import utc_now
from nexus_identity.domain.user import Email, EmailAlreadyExistsError
from nexus_identity.exceptions import RegistrationPendingError
from nexus_identity.infrastructure.email import EmailPurpose
from nexus_identity.services.otp_service import OTPPurpose

if TYPE_CHECKING:
    from nexus_identity.domain.user import UserRepository
    from nexus_identity.infrastructure.email import EmailService
    from nexus_identity.repositories import EphemeralStore
    from nexus_identity.services import OTPService, PasswordHashingService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingRegistration:
    """A sign-up waiting for its verification code."""

    email: str
    password_hash: str
    name: str
    created_at: datetime

    def to_json(self) -> str:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return json.dumps(data)

    @classmethod
    def from_json(cls, raw: str) -> PendingRegistration:
        data = json.loads(raw)
        return cls(
            email=data["email"],
            password_hash=data["password_hash"],
            name=data["name"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )


class RegistrationService:
    """Stage, look up and consume pending registrations."""

    KEY_PREFIX = "pending-registration:"

    def __init__(  # noqa: PLR0913
        self,
        store: EphemeralStore,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        otp_service: OTPService,
        email_service: EmailService,
        ttl_seconds: int = 24 * 60 * 60,
    ):
        self._store = store
        self._user_repo = user_repository
        self._password_service = password_service
        self._otp_service = otp_service
        self._email_service = email_service
        self._ttl_seconds = ttl_seconds

    def _key(self, email: str) -> str:
        return f"{self.KEY_PREFIX}{email}"

    async def stage(self, email: str, password: str, name: str) -> str:
        """Hold a new sign-up and mail its verification code.

        Returns
        -------
        A confirmation message. No tokens are issued before verification.

        Raises
        ------
        EmailAlreadyExistsError
            If a verified user already owns the address
        RegistrationPendingError
            If a registration for the address is already staged
        """
        email = Email.normalize(email)
        name = (name or "").strip()
        if not name:
            msg = "Name cannot be empty"
            raise ValidationError(msg)

        if await self._user_repo.exists_by_email(email):
            raise EmailAlreadyExistsError(email)
        if await self._store.exists(self._key(email)):
            raise RegistrationPendingError(email)

        password_hash = await self._password_service.hash_async(password)
        pending = PendingRegistration(
            email=email,
            password_hash=password_hash,
            name=name,
            created_at=utc_now(),
        )

        # A concurrent stage() may have won since the check above
        written = await self._store.set_if_absent(
            self._key(email),
            pending.to_json(),
            self._ttl_seconds,
        )
        if not written:
            raise RegistrationPendingError(email)

        otp_key = self._otp_service.key_for(OTPPurpose.EMAIL_VERIFY, email)
        code = await self._otp_service.issue(OTPPurpose.EMAIL_VERIFY, email)
        try:
            await self._email_service.send_otp_email(
                to_email=email,
                code=code,
                purpose=EmailPurpose.VERIFICATION,
                expiry_minutes=self._otp_service.expiry_minutes,
            )
        except Exception:
            await self._store.delete(self._key(email))
            await self._otp_service.discard(otp_key)
            raise

        logger.info("Registration staged for %s", email)
        return "Registration successful. Check your email for the verification code."

    async def exists(self, email: str) -> bool:
        return await self._store.exists(self._key(Email.normalize(email)))

    async def consume(self, email: str) -> PendingRegistration | None:
        """Read and delete the pending registration for ``email``.

        Only one caller can consume a given entry; a concurrent caller
        gets ``None``.
        """
        key = self._key(Email.normalize(email))
        raw = await self._store.get(key)
        if raw is None:
            return None
        if not await self._store.compare_and_delete(key, raw):
            return None
        return PendingRegistration.from_json(raw)
