"""Redis implementation of the ephemeral store.

Per-key expiry is delegated to Redis (``SET ... EX``). The two compare
operations run as Lua scripts so the read and the write happen in one
atomic step on the server.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from nexus_identity.exceptions import EphemeralStoreError
from nexus_identity.repositories.ephemeral_store import EphemeralStore

logger = logging.getLogger(__name__)

_COMPARE_AND_DELETE = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""

_COMPARE_AND_SET = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    redis.call('SET', KEYS[1], ARGV[2], 'EX', ARGV[3])
    return 1
end
return 0
"""


class RedisEphemeralStore(EphemeralStore):
    """``EphemeralStore`` backed by a Redis server."""

    def __init__(self, client: redis.Redis, key_prefix: str = "") -> None:
        self._client = client
        self._key_prefix = key_prefix
        self._compare_and_delete = client.register_script(_COMPARE_AND_DELETE)
        self._compare_and_set = client.register_script(_COMPARE_AND_SET)

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "") -> "RedisEphemeralStore":
        client = redis.from_url(url, decode_responses=True)
        return cls(client, key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def _failure(self, operation: str, error: RedisError) -> EphemeralStoreError:
        logger.error("Redis %s failed: %s", operation, error)
        return EphemeralStoreError(f"Redis {operation} failed", operation=operation)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(self._key(key), value, ex=ttl_seconds)
        except RedisError as e:
            raise self._failure("set", e) from e

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(self._key(key))
        except RedisError as e:
            raise self._failure("get", e) from e

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._client.delete(self._key(key)))
        except RedisError as e:
            raise self._failure("delete", e) from e

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._client.exists(self._key(key)))
        except RedisError as e:
            raise self._failure("exists", e) from e

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            written = await self._client.set(
                self._key(key),
                value,
                ex=ttl_seconds,
                nx=True,
            )
        except RedisError as e:
            raise self._failure("set_if_absent", e) from e
        return bool(written)

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        try:
            result = await self._compare_and_delete(
                keys=[self._key(key)],
                args=[expected],
            )
        except RedisError as e:
            raise self._failure("compare_and_delete", e) from e
        return bool(result)

    async def compare_and_set(
        self,
        key: str,
        expected: str,
        value: str,
        ttl_seconds: int,
    ) -> bool:
        try:
            result = await self._compare_and_set(
                keys=[self._key(key)],
                args=[expected, value, ttl_seconds],
            )
        except RedisError as e:
            raise self._failure("compare_and_set", e) from e
        return bool(result)

    async def health_check(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        await self._client.aclose()
