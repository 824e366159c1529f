from datetime import datetime, timedelta, timezone

import pytest

from passport.application.otp_service import OtpService
from passport.application.token_service import TokenService
from passport.domain.entities import OtpKind, OtpScene
from passport.infrastructure.redis_cache.otp_cache import OtpCache
from passport.infrastructure.redis_cache.token_store import RedisTokenStore
from tests.fakes import FakeCache, FakeRedis, FakeSender, FakeUserDirectory

SECRET = "test-secret-key-that-is-long-enough-for-hs256"
NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_scene(name: str, **overrides) -> OtpScene:
    values = dict(
        name=name,
        code_length=6,
        code_expiry=timedelta(minutes=5),
        resend_interval=timedelta(seconds=60),
        template=name,
    )
    values.update(overrides)
    return OtpScene(**values)


@pytest.fixture()
def fake_redis():
    return FakeRedis()


@pytest.fixture()
def token_store(fake_redis):
    return RedisTokenStore(fake_redis)


@pytest.fixture()
def tokens(token_store):
    return TokenService(token_store, secret=SECRET, ttl=timedelta(hours=1))


@pytest.fixture()
def cache():
    return FakeCache()


@pytest.fixture()
def sms():
    return FakeSender()


@pytest.fixture()
def email():
    return FakeSender()


@pytest.fixture()
def scenes():
    return {
        OtpKind.PHONE: {
            "login": make_scene("login"),
            "bind_mobile": make_scene("bind_mobile"),
            "reset_password": make_scene("reset_password"),
        },
        OtpKind.EMAIL: {"reset_password": make_scene("reset_password")},
    }


@pytest.fixture()
def otp(cache, sms, email, scenes):
    return OtpService(
        OtpCache(cache),
        senders={OtpKind.PHONE: sms, OtpKind.EMAIL: email},
        scenes=scenes,
        environment="dev",
        clock=lambda: NOW,
    )


@pytest.fixture()
def users():
    return FakeUserDirectory()
