"""bcrypt password hashing and the password rules for Nexus accounts.

bcrypt is CPU-bound, so the ``*_async`` variants run it on a worker
thread and keep the event loop free.
"""

import asyncio
from functools import cached_property

import bcrypt

from nexus_identity.exceptions import WeakPasswordError

_DUMMY_PASSWORD = b"nexus-unknown-account"  # NOQA: S105


class PasswordHashingService:
    """Hash, check and validate account passwords.

    A hash is computed once per password-set event (sign-up, change,
    reset); callers never re-hash an unchanged password.
    """

    MIN_LENGTH = 6
    MAX_LENGTH = 128

    def __init__(self, rounds: int = 12):
        """
        Parameters
        ----------
        rounds
            bcrypt work factor (log2 of iterations).
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Validate and hash a plaintext password.

        Raises
        ------
        WeakPasswordError
            If the password breaks the length rules
        """
        self.validate_strength(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Malformed hash
            return False

    @cached_property
    def dummy_hash(self) -> str:
        """Hash of a fixed password at this service's work factor.

        Checked against when no account matches, so a failed login costs
        one bcrypt comparison whether or not the account exists.
        """
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_DUMMY_PASSWORD, salt).decode("utf-8")

    async def hash_async(self, password: str) -> str:
        self.validate_strength(password)
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)

    async def verify_dummy_async(self, password: str) -> bool:
        """Run a full bcrypt check that never succeeds for a real password."""
        return await asyncio.to_thread(self.verify, password, self.dummy_hash)

    def validate_strength(self, password: str) -> None:
        """Enforce 6 to 128 characters.

        Raises
        ------
        WeakPasswordError
            If the password is empty, too short or too long
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password) > self.MAX_LENGTH:
            msg = f"Password cannot exceed {self.MAX_LENGTH} characters"
            raise WeakPasswordError(msg)
