"""Ephemeral store implementations (in-memory and Redis)."""

from nexus_identity.infrastructure.cache.memory_store import MemoryEphemeralStore
from nexus_identity.infrastructure.cache.redis_store import RedisEphemeralStore

__all__ = [
    "MemoryEphemeralStore",
    "RedisEphemeralStore",
]
