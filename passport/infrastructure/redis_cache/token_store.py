from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from redis.asyncio import Redis

from passport.domain.entities import TokenRecord
from passport.domain.ports.token_store import TokenStorePort

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RedisTokenStore(TokenStorePort):
    """
    Key layout:
        token:{jti}            -> JSON TokenRecord, TTL = record expiry
        user:{user_id}:tokens  -> set of jti, no TTL (pruned on read)
    """

    def __init__(
        self,
        redis: Redis,
        *,
        token_prefix: str = "token:",
        user_prefix: str = "user:",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._redis = redis
        self._token_prefix = token_prefix
        self._user_prefix = user_prefix
        self._clock = clock

    def _token_key(self, jti: str) -> str:
        return f"{self._token_prefix}{jti}"

    def _index_key(self, user_id: str) -> str:
        return f"{self._user_prefix}{user_id}:tokens"

    async def save(self, record: TokenRecord) -> None:
        ttl_ms = int(record.remaining(self._clock()).total_seconds() * 1000)
        if ttl_ms <= 0:
            raise ValueError(f"token {record.jti} is already expired")
        await self._redis.set(self._token_key(record.jti), record.to_json(), px=ttl_ms)
        await self._redis.sadd(self._index_key(record.user_id), record.jti)

    async def get(self, jti: str) -> Optional[TokenRecord]:
        raw = await self._redis.get(self._token_key(jti))
        if raw is None:
            return None
        return TokenRecord.from_json(raw)

    async def delete_one(self, user_id: str, jti: str) -> None:
        await self._redis.delete(self._token_key(jti))
        await self._redis.srem(self._index_key(user_id), jti)

    async def delete_all(self, user_id: str) -> None:
        index_key = self._index_key(user_id)
        jtis = await self._redis.smembers(index_key)
        if jtis:
            await self._redis.delete(*(self._token_key(jti) for jti in jtis))
        await self._redis.delete(index_key)

    async def get_all(self, user_id: str) -> list[TokenRecord]:
        index_key = self._index_key(user_id)
        jtis = sorted(await self._redis.smembers(index_key))
        if not jtis:
            return []

        raws = await self._redis.mget([self._token_key(jti) for jti in jtis])
        records: list[TokenRecord] = []
        stale: list[str] = []
        for jti, raw in zip(jtis, raws):
            if raw is None:
                stale.append(jti)
            else:
                records.append(TokenRecord.from_json(raw))

        if stale:
            await self._redis.srem(index_key, *stale)
            logger.debug(
                "pruned stale token index entries",
                extra={"user_id": user_id, "count": len(stale)},
            )

        records.sort(key=lambda r: r.issued_at)
        return records
