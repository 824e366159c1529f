from __future__ import annotations

from typing import Mapping, Protocol


class NotificationSender(Protocol):
    async def send(
        self, receiver: str, template_id: str, params: Mapping[str, str]
    ) -> None:
        """Deliver a templated message. Raises on failure."""
