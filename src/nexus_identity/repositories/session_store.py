"""Refresh-token session store.

Exactly one refresh token per user is honored: storing a new one
replaces the old, which is how a refresh token stops working the moment
it is rotated even though its signature stays valid until expiry.
"""

import logging
from abc import ABC, abstractmethod
from uuid import UUID

from nexus_identity.repositories.ephemeral_store import EphemeralStore

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Tracks the single current refresh token for each user."""

    @abstractmethod
    async def put(self, user_id: UUID, refresh_token: str, ttl_seconds: int) -> None:
        """Make ``refresh_token`` the user's only valid session."""

    @abstractmethod
    async def is_current(self, user_id: UUID, refresh_token: str) -> bool:
        """Check whether ``refresh_token`` is the user's current session."""

    @abstractmethod
    async def rotate(
        self,
        user_id: UUID,
        presented_token: str,
        replacement_token: str,
        ttl_seconds: int,
    ) -> bool:
        """Atomically replace ``presented_token`` with ``replacement_token``.

        Returns
        -------
        True if ``presented_token`` was current and has been replaced
        """

    @abstractmethod
    async def revoke(self, user_id: UUID) -> None:
        """End the user's session (logout, password change or reset)."""


class EphemeralSessionStore(SessionStore):
    """``SessionStore`` on top of an ``EphemeralStore``."""

    KEY_PREFIX = "refresh-token:"

    def __init__(self, store: EphemeralStore) -> None:
        self._store = store

    def _key(self, user_id: UUID) -> str:
        return f"{self.KEY_PREFIX}{user_id}"

    async def put(self, user_id: UUID, refresh_token: str, ttl_seconds: int) -> None:
        await self._store.set(self._key(user_id), refresh_token, ttl_seconds)

    async def is_current(self, user_id: UUID, refresh_token: str) -> bool:
        stored = await self._store.get(self._key(user_id))
        return stored is not None and stored == refresh_token

    async def rotate(
        self,
        user_id: UUID,
        presented_token: str,
        replacement_token: str,
        ttl_seconds: int,
    ) -> bool:
        return await self._store.compare_and_set(
            self._key(user_id),
            presented_token,
            replacement_token,
            ttl_seconds,
        )

    async def revoke(self, user_id: UUID) -> None:
        if await self._store.delete(self._key(user_id)):
            logger.debug("Session revoked for user: %s", user_id)
