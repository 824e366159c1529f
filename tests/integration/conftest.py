# tests/integration/conftest.py
import os

import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError

from passport.infrastructure.redis_cache.pool import close_redis, get_redis


@pytest_asyncio.fixture
async def redis_client():
    url = os.environ.get("REDIS_URL", "redis://redis:6379/0")
    # a fresh client per test: each test runs on its own event loop
    await close_redis()
    r = get_redis(url)
    try:
        await r.ping()
    except (RedisConnectionError, OSError):
        await close_redis()
        pytest.skip(f"redis not reachable at {url}")
    try:
        yield r
    finally:
        await close_redis()
