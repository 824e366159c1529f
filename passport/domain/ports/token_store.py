from __future__ import annotations

from typing import Optional, Protocol

from passport.domain.entities import TokenRecord


class TokenStorePort(Protocol):
    async def save(self, record: TokenRecord) -> None:
        """
        Persist the record with TTL = expires_at - now and add its jti to the
        owner's index. Two separate writes, no transaction.
        """

    async def get(self, jti: str) -> Optional[TokenRecord]:
        """Return the record, or None if missing/expired."""

    async def delete_one(self, user_id: str, jti: str) -> None:
        """Delete one record and drop it from the owner's index. Idempotent."""

    async def delete_all(self, user_id: str) -> None:
        """Delete every record reachable from the user's index, then the index."""

    async def get_all(self, user_id: str) -> list[TokenRecord]:
        """
        Return the user's live records. Index entries without a record are
        removed as a side effect.
        """
