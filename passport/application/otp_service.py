from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, Mapping, Optional

from passport.domain import services as domain_services
from passport.domain.entities import OtpKind, OtpScene, OtpTarget
from passport.domain.errors import (
    DomainError,
    InternalError,
    OtpExpired,
    OtpInvalid,
    RateLimitError,
    SceneNotFound,
    SendError,
    ValidationError,
)
from passport.domain.ports.diagnostic_sink import DiagnosticSink
from passport.domain.ports.notification import NotificationSender
from passport.domain.ports.otp_cache import OtpCachePort

logger = logging.getLogger(__name__)

MAX_FAILURES = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def _cache_failures(action: str, target: OtpTarget) -> Iterator[None]:
    try:
        yield
    except DomainError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception(
            "otp cache failure",
            extra={"action": action, "kind": target.kind.value, "scene": target.scene},
        )
        raise InternalError() from exc


class OtpService:
    """
    Send/verify flows for one-time codes keyed by (kind, scene, receiver).

    All anti-abuse guarantees come from atomic cache primitives: the resend
    guard is a set-if-absent, the failure counter an atomic increment, and a
    correct code is consumed by whoever deletes it first.
    """

    def __init__(
        self,
        cache: OtpCachePort,
        *,
        senders: Mapping[OtpKind, NotificationSender],
        scenes: Mapping[OtpKind, Mapping[str, OtpScene]],
        environment: str = "dev",
        max_failures: int = MAX_FAILURES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._cache = cache
        self._senders = dict(senders)
        self._scenes = {kind: dict(items) for kind, items in scenes.items()}
        self._production = environment == "prod"
        self._max_failures = max_failures
        self._clock = clock

    def scene(self, kind: OtpKind, name: str) -> OtpScene:
        scene = self._scenes.get(kind, {}).get(name)
        if scene is None:
            raise SceneNotFound()
        return scene

    async def send_code(
        self,
        kind: OtpKind | str,
        scene: str,
        receiver: str,
        *,
        debug: Optional[DiagnosticSink] = None,
    ) -> datetime:
        """Send a fresh code and return when it stops being valid."""
        target = OtpTarget(OtpKind.parse(kind), scene, receiver)
        config = self.scene(target.kind, scene)
        sender = self._senders.get(target.kind)
        if sender is None:
            raise ValidationError(f"no sender for channel {target.kind.value}")

        with _cache_failures("acquire_interval", target):
            acquired = await self._cache.acquire_interval(target, config.resend_interval)
        if not acquired:
            raise RateLimitError()

        code = domain_services.generate_code(config.code_length)

        # the guard stays in place on failure so a broken provider is not hammered
        try:
            await sender.send(target.receiver, config.template, {"code": code})
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "sending verification code failed",
                exc_info=True,
                extra={"kind": target.kind.value, "scene": scene},
            )
            raise SendError() from exc

        with _cache_failures("store_code", target):
            await self._cache.store_code(target, code, config.code_expiry)
        await self._clear_failures(target)

        if debug is not None and not self._production:
            debug.record("otp", code)

        return self._clock() + config.code_expiry

    async def send_phone_code(
        self, phone: str, scene: str, *, debug: Optional[DiagnosticSink] = None
    ) -> datetime:
        return await self.send_code(OtpKind.PHONE, scene, phone, debug=debug)

    async def send_email_code(
        self, email: str, scene: str, *, debug: Optional[DiagnosticSink] = None
    ) -> datetime:
        return await self.send_code(OtpKind.EMAIL, scene, email, debug=debug)

    async def verify_code(
        self, kind: OtpKind | str, scene: str, receiver: str, code: str
    ) -> None:
        """Consume the code on success; raise OtpExpired / OtpInvalid otherwise."""
        target = OtpTarget(OtpKind.parse(kind), scene, receiver)
        self.scene(target.kind, scene)
        if not code:
            raise ValidationError("code is required")

        with _cache_failures("get_code", target):
            stored = await self._cache.get_code(target)
            if stored is None:
                raise OtpExpired()
            # locked out: report exactly like an expired code
            if await self._cache.get_failures(target) >= self._max_failures:
                raise OtpExpired()

        if not domain_services.secure_compare(stored, code):
            with _cache_failures("record_failure", target):
                failures = await self._cache.record_failure(target)
            if failures >= self._max_failures:
                raise OtpExpired()
            raise OtpInvalid()

        with _cache_failures("consume_code", target):
            consumed = await self._cache.consume_code(target)
        if not consumed:
            # a concurrent verification got there first
            raise OtpExpired()
        await self._clear_failures(target)

    async def verify_phone_code(self, phone: str, scene: str, code: str) -> None:
        await self.verify_code(OtpKind.PHONE, scene, phone, code)

    async def verify_email_code(self, email: str, scene: str, code: str) -> None:
        await self.verify_code(OtpKind.EMAIL, scene, email, code)

    async def _clear_failures(self, target: OtpTarget) -> None:
        # the counter expires on its own; a failed delete only delays that
        try:
            await self._cache.clear_failures(target)
        except Exception:  # noqa: BLE001
            logger.warning(
                "clearing otp failure counter failed",
                exc_info=True,
                extra={"kind": target.kind.value, "scene": target.scene},
            )
