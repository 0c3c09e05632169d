"""One-time code (OTP) service.

Codes are numeric, fixed-length and purpose-scoped: the storage key
starts with the purpose, so a password-reset code can never satisfy an
email-verification check and vice versa. Storing a code for a key
replaces the previous one, and a successful check consumes it.
"""

import hmac
import json
import logging
import secrets
from datetime import datetime, timedelta
from enum import Enum

from nexus.domain.shared.time import utc_now
from nexus_identity.repositories.ephemeral_store import EphemeralStore

logger = logging.getLogger(__name__)


class OTPPurpose(str, Enum):
    """Key namespace for a one-time code."""

    EMAIL_VERIFY = "email-verify"
    PASSWORD_RESET = "password-reset"


class OTPService:
    """Generate, store and validate single-use one-time codes."""

    DEFAULT_LENGTH = 6
    DEFAULT_EXPIRY_MINUTES = 10

    def __init__(
        self,
        store: EphemeralStore,
        length: int = DEFAULT_LENGTH,
        expiry_minutes: int = DEFAULT_EXPIRY_MINUTES,
    ):
        if length < 4:
            msg = "OTP length must be at least 4 digits"
            raise ValueError(msg)
        self._store = store
        self._length = length
        self._expiry = timedelta(minutes=expiry_minutes)

    @property
    def expiry_minutes(self) -> int:
        return int(self._expiry.total_seconds() // 60)

    @staticmethod
    def key_for(purpose: OTPPurpose, email: str) -> str:
        return f"{purpose.value}:{email}"

    def generate(self) -> str:
        """Return a fresh numeric code from a cryptographically secure source."""
        return f"{secrets.randbelow(10**self._length):0{self._length}d}"

    async def store(self, key: str, code: str) -> None:
        """Store ``code`` under ``key``, discarding any earlier code for it."""
        expires_at = utc_now() + self._expiry
        record = json.dumps({"code": code, "expires_at": expires_at.isoformat()})
        await self._store.set(key, record, int(self._expiry.total_seconds()))
        logger.debug("OTP stored for key: %s", key.split(":", 1)[0])

    async def issue(self, purpose: OTPPurpose, email: str) -> str:
        """Generate and store a new code for ``email``; returns the code."""
        code = self.generate()
        await self.store(self.key_for(purpose, email), code)
        return code

    async def verify(self, key: str, submitted: str) -> bool:
        """Check ``submitted`` against the code stored under ``key``.

        Returns False if no code is stored, the code differs or it has
        expired. On success the record is deleted, so a code works once.
        """
        raw = await self._store.get(key)
        if raw is None:
            return False

        try:
            record = json.loads(raw)
            code = record["code"]
            expires_at = datetime.fromisoformat(record["expires_at"])
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding malformed OTP record")
            await self._store.delete(key)
            return False

        if utc_now() >= expires_at:
            return False

        if not hmac.compare_digest(code.encode(), (submitted or "").encode()):
            return False

        # Only the caller that actually removes the record wins
        return await self._store.compare_and_delete(key, raw)

    async def discard(self, key: str) -> None:
        await self._store.delete(key)
