from datetime import datetime, timedelta, timezone

import jwt
import pytest

from passport.application.token_service import TokenService
from passport.domain.errors import (
    InternalError,
    NotFoundError,
    TokenExpired,
    ValidationError,
)
from tests.conftest import SECRET
from tests.fakes import FailingTokenStore


@pytest.mark.asyncio
async def test_issue_then_validate_returns_user(tokens):
    token = await tokens.issue("42")
    assert await tokens.validate(token) == "42"


@pytest.mark.asyncio
async def test_issued_claims_and_record(tokens, token_store):
    token = await tokens.issue("42")
    claims = jwt.decode(token, SECRET, algorithms=["HS256"])

    assert claims["sub"] == "42"
    assert claims["exp"] - claims["iat"] == 3600

    record = await token_store.get(claims["jti"])
    assert record.user_id == "42"
    assert record.signed_value == token
    assert int(record.expires_at.timestamp()) == claims["exp"]


@pytest.mark.asyncio
async def test_each_issue_gets_a_fresh_jti(tokens):
    t1, t2 = await tokens.issue("42"), await tokens.issue("42")
    j1 = jwt.decode(t1, SECRET, algorithms=["HS256"])["jti"]
    j2 = jwt.decode(t2, SECRET, algorithms=["HS256"])["jti"]
    assert j1 != j2


@pytest.mark.asyncio
async def test_issue_requires_user_id(tokens):
    with pytest.raises(ValidationError):
        await tokens.issue("")


@pytest.mark.asyncio
async def test_revoke_all_invalidates_tokens_with_valid_signature(tokens):
    t1 = await tokens.issue("42")
    t2 = await tokens.issue("42")
    other = await tokens.issue("7")

    await tokens.revoke_all("42")

    for token in (t1, t2):
        # the signature and exp claim still check out on their own
        jwt.decode(token, SECRET, algorithms=["HS256"])
        with pytest.raises(TokenExpired):
            await tokens.validate(token)
    assert await tokens.validate(other) == "7"


@pytest.mark.asyncio
async def test_revoke_single_token(tokens):
    t1 = await tokens.issue("42")
    t2 = await tokens.issue("42")
    jti = jwt.decode(t1, SECRET, algorithms=["HS256"])["jti"]

    await tokens.revoke(jti)
    await tokens.revoke(jti)  # idempotent

    with pytest.raises(TokenExpired):
        await tokens.validate(t1)
    assert await tokens.validate(t2) == "42"


@pytest.mark.asyncio
async def test_revoke_unknown_jti_is_silent(tokens):
    await tokens.revoke("does-not-exist")


@pytest.mark.asyncio
async def test_store_expiry_is_reported_as_expired(tokens, fake_redis):
    token = await tokens.issue("42")
    fake_redis.advance(3601)

    with pytest.raises(TokenExpired):
        await tokens.validate(token)


@pytest.mark.asyncio
async def test_expired_signature_is_reported_as_expired(tokens):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {
            "sub": "42",
            "jti": "old",
            "iat": int(past.timestamp()),
            "exp": int((past + timedelta(hours=1)).timestamp()),
        },
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenExpired):
        await tokens.validate(token)


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
async def test_malformed_tokens_are_reported_as_expired(tokens, token):
    with pytest.raises(TokenExpired):
        await tokens.validate(token)


@pytest.mark.asyncio
async def test_foreign_signature_is_reported_as_expired(token_store):
    ours = TokenService(token_store, secret="a" * 40, ttl=timedelta(hours=1))
    theirs = TokenService(token_store, secret="b" * 40, ttl=timedelta(hours=1))
    token = await theirs.issue("42")

    with pytest.raises(TokenExpired):
        await ours.validate(token)


@pytest.mark.asyncio
async def test_save_failure_returns_no_token():
    tokens = TokenService(FailingTokenStore("save"), secret=SECRET, ttl=timedelta(hours=1))
    with pytest.raises(InternalError) as ei:
        await tokens.issue("42")
    assert str(ei.value) == "internal error"


@pytest.mark.asyncio
async def test_lookup_failure_is_internal_error():
    store = FailingTokenStore("get")
    tokens = TokenService(store, secret=SECRET, ttl=timedelta(hours=1))
    token = await tokens.issue("42")

    with pytest.raises(InternalError):
        await tokens.validate(token)


@pytest.mark.asyncio
async def test_authenticate_returns_record(tokens):
    token = await tokens.issue("42")
    record = await tokens.authenticate(token)
    assert record.user_id == "42"
    assert record.signed_value == token


@pytest.mark.asyncio
async def test_list_sessions(tokens, fake_redis):
    await tokens.issue("42")
    await tokens.issue("42")
    await tokens.issue("7")

    sessions = await tokens.list_sessions("42")

    assert len(sessions) == 2
    assert {s.user_id for s in sessions} == {"42"}


@pytest.mark.asyncio
async def test_revoke_session_only_for_owner(tokens):
    mine = await tokens.issue("42")
    jti = jwt.decode(mine, SECRET, algorithms=["HS256"])["jti"]

    with pytest.raises(NotFoundError):
        await tokens.revoke_session("7", jti)
    assert await tokens.validate(mine) == "42"

    await tokens.revoke_session("42", jti)
    with pytest.raises(TokenExpired):
        await tokens.validate(mine)
    with pytest.raises(NotFoundError):
        await tokens.revoke_session("42", jti)


def test_constructor_rejects_bad_config(token_store):
    with pytest.raises(ValueError):
        TokenService(token_store, secret="", ttl=timedelta(hours=1))
    with pytest.raises(ValueError):
        TokenService(token_store, secret=SECRET, ttl=timedelta(0))
