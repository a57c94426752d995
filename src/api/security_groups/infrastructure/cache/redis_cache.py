"""Redis PermissionCache backend using redis.asyncio.

Values are stored as JSON strings with a per-key expiry. Each invalidation
scope is a Redis set holding the keys registered under it, so invalidation
never needs a KEYS/SCAN pattern match.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

import redis.asyncio as redis
from redis.exceptions import RedisError

from security_groups.ports.exceptions import CacheUnavailableError


class RedisPermissionCache:
    """PermissionCache backed by Redis.

    Index sets are refreshed on every registration with a TTL at least as
    long as the key being registered, so an index never expires before
    the keys it tracks.
    """

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = "security_groups",
        index_ttl_seconds: int = 600,
    ) -> None:
        self._client = client
        self._index_prefix = f"{key_prefix}:scope:"
        self._index_ttl_seconds = index_ttl_seconds

    @classmethod
    def from_url(
        cls,
        redis_url: str,
        key_prefix: str = "security_groups",
        index_ttl_seconds: int = 600,
    ) -> RedisPermissionCache:
        """Create a cache with its own connection pool."""
        client = redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=20,
        )
        return cls(client, key_prefix=key_prefix, index_ttl_seconds=index_ttl_seconds)

    def _index_key(self, scope: str) -> str:
        return f"{self._index_prefix}{scope}"

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            raise CacheUnavailableError(f"Redis GET failed: {e}") from e
        if raw is None:
            return None
        return json.loads(raw)

    async def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: int,
        scopes: Iterable[str],
    ) -> None:
        payload = json.dumps(value)
        index_ttl = max(ttl_seconds, self._index_ttl_seconds)
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.set(key, payload, ex=ttl_seconds)
                for scope in scopes:
                    index_key = self._index_key(scope)
                    pipe.sadd(index_key, key)
                    pipe.expire(index_key, index_ttl)
                await pipe.execute()
        except RedisError as e:
            raise CacheUnavailableError(f"Redis SET failed: {e}") from e

    async def invalidate(self, *scopes: str) -> int:
        if not scopes:
            return 0
        index_keys = [self._index_key(scope) for scope in scopes]
        try:
            keys = await self._client.sunion(index_keys)
            async with self._client.pipeline(transaction=True) as pipe:
                if keys:
                    pipe.delete(*keys)
                pipe.delete(*index_keys)
                results = await pipe.execute()
        except RedisError as e:
            raise CacheUnavailableError(f"Redis invalidation failed: {e}") from e
        return int(results[0]) if keys else 0

    async def close(self) -> None:
        await self._client.aclose()
