"""Redis-backed secret store (production backend)."""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from otp_gateway.errors import StoreError
from otp_gateway.store.base import SecretStore

logger = logging.getLogger(__name__)

# INCR only when the key still exists, so an expired counter is never
# re-created without a TTL.
_INCR_EXISTING = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return redis.call('INCR', KEYS[1])
end
return false
"""


class RedisSecretStore(SecretStore):
    """:class:`SecretStore` over a shared ``redis.asyncio`` connection pool."""

    def __init__(self, client: aioredis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> RedisSecretStore:
        return cls(aioredis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except (RedisError, OSError) as exc:
            raise StoreError("get", key, exc) from exc

    async def set(self, key: str, value: str, ttl: int) -> None:
        try:
            await self._redis.set(key, value, ex=ttl)
        except (RedisError, OSError) as exc:
            raise StoreError("set", key, exc) from exc

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self._redis.delete(*keys)
        except (RedisError, OSError) as exc:
            raise StoreError("delete", ",".join(keys), exc) from exc

    async def incr(
        self, key: str, ttl: int | None = None, existing_only: bool = False
    ) -> int | None:
        try:
            if existing_only:
                result = await self._redis.eval(_INCR_EXISTING, 1, key)
                return int(result) if result is not None else None
            if ttl is None:
                return int(await self._redis.incr(key))
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.set(key, 0, ex=ttl, nx=True)
                pipe.incr(key)
                _, value = await pipe.execute()
            return int(value)
        except (RedisError, OSError) as exc:
            raise StoreError("incr", key, exc) from exc

    async def ttl(self, key: str) -> int:
        try:
            return int(await self._redis.ttl(key))
        except (RedisError, OSError) as exc:
            raise StoreError("ttl", key, exc) from exc

    async def scan(self, prefix: str) -> list[str]:
        try:
            return [key async for key in self._redis.scan_iter(match=f"{prefix}*")]
        except (RedisError, OSError) as exc:
            raise StoreError("scan", prefix, exc) from exc

    async def close(self) -> None:
        await self._redis.aclose()
        logger.info("Redis connection closed")
