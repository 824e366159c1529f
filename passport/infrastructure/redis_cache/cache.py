from __future__ import annotations

from datetime import timedelta
from typing import Optional

from redis.asyncio import Redis

from passport.domain.ports.cache import CachePort


_LUA_INCR_WITH_TTL = """
-- KEYS[1]: counter key
-- ARGV[1]: ttl in milliseconds, applied only on creation
local n = redis.call('INCR', KEYS[1])
if n == 1 then
  redis.call('PEXPIRE', KEYS[1], ARGV[1])
end
return n
"""


def _ttl_ms(ttl: timedelta) -> int:
    ms = int(ttl.total_seconds() * 1000)
    if ms <= 0:
        raise ValueError(f"ttl must be positive, got {ttl!r}")
    return ms


class RedisCache(CachePort):
    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        await self._redis.set(key, value, px=_ttl_ms(ttl))

    async def get(self, key: str) -> Optional[str]:
        return await self._redis.get(key)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(await self._redis.delete(*keys))

    async def exists(self, key: str) -> bool:
        return int(await self._redis.exists(key)) > 0

    async def set_if_absent(self, key: str, value: str, ttl: timedelta) -> bool:
        # SET NX returns None when the key is already there
        res = await self._redis.set(key, value, px=_ttl_ms(ttl), nx=True)
        return bool(res)

    async def incr(self, key: str, ttl: timedelta) -> int:
        res = await self._redis.eval(_LUA_INCR_WITH_TTL, 1, key, _ttl_ms(ttl))
        return int(res)
