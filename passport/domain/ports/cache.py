from __future__ import annotations

from datetime import timedelta
from typing import Optional, Protocol


class CachePort(Protocol):
    """Networked key-value store with per-key TTL and atomic primitives."""

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        """Store/replace value with TTL."""

    async def get(self, key: str) -> Optional[str]:
        """Return the value, or None on a miss."""

    async def delete(self, *keys: str) -> int:
        """Delete keys; return how many actually existed."""

    async def exists(self, key: str) -> bool:
        """True if the key is present."""

    async def set_if_absent(self, key: str, value: str, ttl: timedelta) -> bool:
        """Atomically create key with TTL. False if it already existed."""

    async def incr(self, key: str, ttl: timedelta) -> int:
        """
        Atomically increment an integer counter and return the new value.
        The TTL is applied only when the increment creates the key.
        """
