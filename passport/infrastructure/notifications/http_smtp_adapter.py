from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Mapping, Optional

import httpx

from passport.domain.errors import TemplateNotConfigured
from passport.domain.ports.notification import NotificationSender
from passport.infrastructure.notifications.retry import (
    DeliveryError,
    RetryPolicy,
    send_with_retry,
)


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    body: str  # str.format placeholders, e.g. "{code}"


class HttpSmtpEmailSender(NotificationSender):
    def __init__(
        self,
        base_url: str,
        *,
        templates: Mapping[str, EmailTemplate],
        from_address: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/send",
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._templates = dict(templates)
        self._from = from_address
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    def render(self, template_id: str, params: Mapping[str, str]) -> tuple[str, str]:
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotConfigured(f"email template {template_id!r} not configured")
        try:
            return template.subject, template.body.format_map(params)
        except (KeyError, IndexError, ValueError) as e:
            raise TemplateNotConfigured(
                f"email template {template_id!r} cannot be rendered"
            ) from e

    async def send(
        self, receiver: str, template_id: str, params: Mapping[str, str]
    ) -> None:
        subject, body = self.render(template_id, params)
        payload = {"from": self._from, "to": receiver, "subject": subject, "body": body}
        await send_with_retry(
            lambda: self._post(payload), self._retry_policy, sleep=self._sleep
        )

    async def _post(self, payload: dict[str, str]) -> None:
        url = f"{self._base_url}{self._send_path}"
        try:
            resp = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise DeliveryError(f"SMTP HTTP error: {e}") from e
        if not (200 <= resp.status_code < 300):
            text = resp.text[:200]
            raise DeliveryError(f"SMTP responded {resp.status_code}: {text}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
