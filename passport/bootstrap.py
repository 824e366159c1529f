"""Explicit builders: every dependency is passed in, nothing is looked up globally."""

from __future__ import annotations

from datetime import timedelta

from redis.asyncio import Redis

from passport.application.otp_service import OtpService
from passport.application.token_service import TokenService
from passport.domain.entities import OtpKind, OtpScene
from passport.domain.ports.notification import NotificationSender
from passport.infrastructure.redis_cache.cache import RedisCache
from passport.infrastructure.redis_cache.otp_cache import OtpCache
from passport.infrastructure.redis_cache.token_store import RedisTokenStore
from passport.settings import OtpSceneSettings, Settings


def _scene(name: str, cfg: OtpSceneSettings) -> OtpScene:
    return OtpScene(
        name=name,
        code_length=cfg.code_length,
        code_expiry=timedelta(seconds=cfg.expires_in_seconds),
        resend_interval=timedelta(seconds=cfg.resend_interval_seconds),
        template=cfg.template,
    )


def load_scenes(settings: Settings) -> dict[OtpKind, dict[str, OtpScene]]:
    return {
        OtpKind.PHONE: {n: _scene(n, c) for n, c in settings.otp_phone_scenes.items()},
        OtpKind.EMAIL: {n: _scene(n, c) for n, c in settings.otp_email_scenes.items()},
    }


def build_token_service(settings: Settings, redis: Redis) -> TokenService:
    return TokenService(
        RedisTokenStore(redis),
        secret=settings.jwt_secret,
        ttl=timedelta(seconds=settings.token_ttl_seconds),
    )


def build_otp_service(
    settings: Settings,
    redis: Redis,
    *,
    sms_sender: NotificationSender,
    email_sender: NotificationSender,
) -> OtpService:
    return OtpService(
        OtpCache(RedisCache(redis)),
        senders={OtpKind.PHONE: sms_sender, OtpKind.EMAIL: email_sender},
        scenes=load_scenes(settings),
        environment=settings.app_env,
    )
