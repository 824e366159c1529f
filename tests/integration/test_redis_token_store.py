import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from passport.application.token_service import TokenService
from passport.domain.entities import TokenRecord
from passport.domain.errors import TokenExpired
from passport.infrastructure.redis_cache.token_store import RedisTokenStore

pytestmark = pytest.mark.integration


def make_record(user_id: str, ttl: timedelta) -> TokenRecord:
    now = datetime.now(timezone.utc)
    return TokenRecord(str(uuid4()), user_id, now, now + ttl, "signed")


@pytest.mark.asyncio
async def test_record_ttl_tracks_expiry(redis_client):
    store = RedisTokenStore(redis_client)
    user_id = f"it-{uuid4()}"
    record = make_record(user_id, timedelta(seconds=30))

    await store.save(record)

    assert 0 < await redis_client.pttl(f"token:{record.jti}") <= 30_000
    assert await redis_client.ttl(f"user:{user_id}:tokens") == -1
    assert (await store.get(record.jti)) == record
    await store.delete_all(user_id)


@pytest.mark.asyncio
async def test_index_self_heals_after_expiry(redis_client):
    store = RedisTokenStore(redis_client)
    user_id = f"it-{uuid4()}"
    short = make_record(user_id, timedelta(seconds=1))
    long = make_record(user_id, timedelta(seconds=30))
    await store.save(short)
    await store.save(long)

    await asyncio.sleep(1.2)

    assert [r.jti for r in await store.get_all(user_id)] == [long.jti]
    assert await redis_client.smembers(f"user:{user_id}:tokens") == {long.jti}
    await store.delete_all(user_id)
    assert await redis_client.exists(f"user:{user_id}:tokens") == 0


@pytest.mark.asyncio
async def test_revoke_all_end_to_end(redis_client):
    tokens = TokenService(
        RedisTokenStore(redis_client),
        secret="integration-secret-that-is-long-enough",
        ttl=timedelta(minutes=5),
    )
    user_id = f"it-{uuid4()}"
    token = await tokens.issue(user_id)
    assert await tokens.validate(token) == user_id

    await tokens.revoke_all(user_id)

    with pytest.raises(TokenExpired):
        await tokens.validate(token)
