from __future__ import annotations

from datetime import timedelta
from typing import Optional

from passport.domain.entities import OtpTarget
from passport.domain.ports.cache import CachePort
from passport.domain.ports.otp_cache import OtpCachePort

DEFAULT_FAILURE_WINDOW = timedelta(hours=1)


class OtpCache(OtpCachePort):
    """
    Key layout (kept compatible with existing deployments):
        otp:interval:{kind}:{scene}:{receiver}  -> "1", TTL = resend interval
        otp:code:{kind}:{scene}:{receiver}      -> digits, TTL = code expiry
        otp:fail:{kind}:{scene}:{receiver}      -> counter, TTL = failure window
    """

    def __init__(
        self,
        cache: CachePort,
        *,
        key_prefix: str = "otp:",
        failure_window: timedelta = DEFAULT_FAILURE_WINDOW,
    ) -> None:
        self._cache = cache
        self._prefix = key_prefix
        self._failure_window = failure_window

    def _key(self, part: str, target: OtpTarget) -> str:
        return f"{self._prefix}{part}:{target.key_suffix()}"

    async def acquire_interval(self, target: OtpTarget, ttl: timedelta) -> bool:
        return await self._cache.set_if_absent(self._key("interval", target), "1", ttl)

    async def store_code(self, target: OtpTarget, code: str, ttl: timedelta) -> None:
        await self._cache.set(self._key("code", target), code, ttl)

    async def get_code(self, target: OtpTarget) -> Optional[str]:
        return await self._cache.get(self._key("code", target))

    async def consume_code(self, target: OtpTarget) -> bool:
        return await self._cache.delete(self._key("code", target)) == 1

    async def get_failures(self, target: OtpTarget) -> int:
        raw = await self._cache.get(self._key("fail", target))
        return int(raw) if raw else 0

    async def record_failure(self, target: OtpTarget) -> int:
        return await self._cache.incr(self._key("fail", target), self._failure_window)

    async def clear_failures(self, target: OtpTarget) -> None:
        await self._cache.delete(self._key("fail", target))
