from __future__ import annotations

import logging
from typing import Mapping

from passport.domain.ports.notification import NotificationSender

logger = logging.getLogger(__name__)


class MockSender(NotificationSender):
    """Logs instead of sending. Used for every channel in dev."""

    def __init__(self, channel: str) -> None:
        self.channel = channel

    async def send(
        self, receiver: str, template_id: str, params: Mapping[str, str]
    ) -> None:
        logger.info(
            "mock send",
            extra={
                "channel": self.channel,
                "receiver": receiver,
                "template": template_id,
                "params": dict(params),
            },
        )
