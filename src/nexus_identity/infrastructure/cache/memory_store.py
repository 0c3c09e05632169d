"""In-memory ephemeral store.

Suitable for single-instance deployments, development and tests.
Data is lost when the application restarts.
"""

import threading
import time
from typing import Callable

from nexus_identity.repositories.ephemeral_store import EphemeralStore


class MemoryEphemeralStore(EphemeralStore):
    """Dict-backed ``EphemeralStore`` with lazy expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, tuple[str, float]] = {}  # key -> (value, expires_at)
        self._lock = threading.RLock()
        self._clock = clock

    def _live_value(self, key: str) -> str | None:
        entry = self._store.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None

        return value

    def _write(self, key: str, value: str, ttl_seconds: int) -> None:
        self._store[key] = (value, self._clock() + ttl_seconds)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._write(key, value, ttl_seconds)

    async def get(self, key: str) -> str | None:
        with self._lock:
            return self._live_value(key)

    async def delete(self, key: str) -> bool:
        with self._lock:
            if self._live_value(key) is None:
                return False
            del self._store[key]
            return True

    async def exists(self, key: str) -> bool:
        with self._lock:
            return self._live_value(key) is not None

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        with self._lock:
            if self._live_value(key) is not None:
                return False
            self._write(key, value, ttl_seconds)
            return True

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        with self._lock:
            if self._live_value(key) != expected:
                return False
            del self._store[key]
            return True

    async def compare_and_set(
        self,
        key: str,
        expected: str,
        value: str,
        ttl_seconds: int,
    ) -> bool:
        with self._lock:
            if self._live_value(key) != expected:
                return False
            self._write(key, value, ttl_seconds)
            return True
