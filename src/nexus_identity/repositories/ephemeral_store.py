"""Abstract interface for the ephemeral key-value store.

One-time codes, staged registrations and refresh sessions all live in a
store with per-key expiry. The guarantees the identity flows rely on
(one active code per key, one session per user) come from the store's
atomic per-key operations, never from in-process locking.
"""

from abc import ABC, abstractmethod


class EphemeralStore(ABC):
    """Async key-value store with per-key time-to-live."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the live value for ``key``, or None if absent or expired."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete ``key``. Returns True if a live value was removed."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether ``key`` holds a live value."""

    @abstractmethod
    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Atomically store ``value`` only if ``key`` is free.

        Returns
        -------
        True if the value was written, False if the key was already taken
        """

    @abstractmethod
    async def compare_and_delete(self, key: str, expected: str) -> bool:
        """Atomically delete ``key`` only if it still holds ``expected``.

        Returns
        -------
        True if this call removed the value
        """

    @abstractmethod
    async def compare_and_set(
        self,
        key: str,
        expected: str,
        value: str,
        ttl_seconds: int,
    ) -> bool:
        """Atomically replace ``expected`` with ``value`` under ``key``.

        Returns
        -------
        True if the swap happened, False if the key held something else
        """

    async def close(self) -> None:
        """Release any connections held by the store."""
