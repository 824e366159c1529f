from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from passport.application.otp_service import OtpService
from passport.application.token_service import TokenService
from passport.domain.entities import OtpKind
from passport.infrastructure.diagnostics import DebugInfo
from passport.infrastructure.redis_cache.otp_cache import OtpCache
from passport.infrastructure.redis_cache.token_store import RedisTokenStore
from passport.main import create_app
from passport.presentation.dependencies import (
    get_debug_info,
    get_otp_service,
    get_token_service,
)
from tests.conftest import SECRET, make_scene
from tests.fakes import FakeCache, FakeRedis, FakeSender


@pytest.fixture()
def app_and_deps():
    app = create_app()
    redis = FakeRedis()
    tokens = TokenService(RedisTokenStore(redis), secret=SECRET, ttl=timedelta(hours=1))
    sms = FakeSender()
    otp = OtpService(
        OtpCache(FakeCache()),
        senders={OtpKind.PHONE: sms, OtpKind.EMAIL: FakeSender()},
        scenes={OtpKind.PHONE: {"login": make_scene("login")}},
    )

    app.dependency_overrides[get_token_service] = lambda: tokens
    app.dependency_overrides[get_otp_service] = lambda: otp
    app.dependency_overrides[get_debug_info] = lambda: DebugInfo()

    try:
        yield app, {"tokens": tokens, "otp": otp, "sms": sms, "redis": redis}
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    app, _ = app_and_deps
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def deps(app_and_deps):
    return app_and_deps[1]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
