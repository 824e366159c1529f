from __future__ import annotations

import json
import logging
from typing import Mapping, Optional

import httpx

from passport.domain.errors import TemplateNotConfigured
from passport.domain.ports.notification import NotificationSender
from passport.infrastructure.notifications.retry import DeliveryError

logger = logging.getLogger(__name__)


class HttpSmsSender(NotificationSender):
    """
    Posts to an SMS gateway that speaks the common provider shape:
    a signed template code plus JSON-encoded template params.

    A 2xx answer is not enough: the body must carry code == "OK"
    (providers report balance or throttling problems that way).
    """

    def __init__(
        self,
        base_url: str,
        *,
        sign_name: str,
        template_mapping: Mapping[str, str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/sms/send",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._sign_name = sign_name
        self._template_mapping = dict(template_mapping)
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self, receiver: str, template_id: str, params: Mapping[str, str]
    ) -> None:
        template_code = self._template_mapping.get(template_id)
        if not template_code:
            raise TemplateNotConfigured(f"sms template {template_id!r} not configured")

        payload = {
            "phone_numbers": receiver,
            "sign_name": self._sign_name,
            "template_code": template_code,
            "template_param": json.dumps(dict(params)),
        }
        url = f"{self._base_url}{self._send_path}"
        try:
            resp = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise DeliveryError(f"SMS HTTP error: {e}") from e

        if not (200 <= resp.status_code < 300):
            raise DeliveryError(f"SMS responded {resp.status_code}: {resp.text[:200]}")
        try:
            body = resp.json()
        except ValueError as e:
            raise DeliveryError("SMS gateway returned a non-JSON body") from e

        if body.get("code") != "OK":
            raise DeliveryError(
                f"SMS provider rejected message: {body.get('code')} - {body.get('message')}"
            )
        logger.info("sms sent", extra={"request_id": body.get("request_id")})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
