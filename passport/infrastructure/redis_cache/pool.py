from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis

from passport.settings import get_settings

_client: Optional[Redis] = None


def get_redis(url: Optional[str] = None) -> Redis:
    """
    Process-wide Redis client for tokens and OTP state, created on first use.

    `url` only matters for that first call; it defaults to settings.redis_url.
    Responses are decoded to str since every value we store is text.
    """
    global _client
    if _client is None:
        _client = Redis.from_url(
            url or get_settings().redis_url, encoding="utf-8", decode_responses=True
        )
    return _client


async def close_redis() -> None:
    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()
