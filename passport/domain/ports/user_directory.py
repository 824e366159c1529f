from __future__ import annotations

from typing import Optional, Protocol

from passport.domain.entities import OtpKind


class UserDirectoryPort(Protocol):
    """The slice of user persistence the account flows need."""

    async def find_id_by_receiver(self, kind: OtpKind, receiver: str) -> Optional[str]:
        """Resolve the user owning a phone number or email, or None."""

    async def find_id_by_username(self, username: str) -> Optional[str]:
        ...

    async def is_available(self, user_id: str) -> bool:
        """False for disabled accounts."""

    async def get_password_hash(self, user_id: str) -> Optional[str]:
        """Return the stored password hash, or None for unknown users."""

    async def update_password(self, user_id: str, password_hash: str) -> None:
        """Replace the user's password hash."""

    async def update_phone(self, user_id: str, phone: str) -> None:
        ...
