from __future__ import annotations

from datetime import timedelta
from typing import Optional, Protocol

from passport.domain.entities import OtpTarget


class OtpCachePort(Protocol):
    async def acquire_interval(self, target: OtpTarget, ttl: timedelta) -> bool:
        """Set-if-absent on the resend guard. False means 'too soon'."""

    async def store_code(self, target: OtpTarget, code: str, ttl: timedelta) -> None:
        """Store/replace the live code."""

    async def get_code(self, target: OtpTarget) -> Optional[str]:
        """Return the live code or None."""

    async def consume_code(self, target: OtpTarget) -> bool:
        """Delete the code. True only for the caller that actually removed it."""

    async def get_failures(self, target: OtpTarget) -> int:
        """Current failure count (0 when absent)."""

    async def record_failure(self, target: OtpTarget) -> int:
        """Atomically bump the failure counter; return the new count."""

    async def clear_failures(self, target: OtpTarget) -> None:
        """Drop the failure counter."""
