from __future__ import annotations

from typing import Optional

import httpx

from passport.domain.ports.notification import NotificationSender
from passport.infrastructure.notifications.http_sms_adapter import HttpSmsSender
from passport.infrastructure.notifications.http_smtp_adapter import (
    EmailTemplate,
    HttpSmtpEmailSender,
)
from passport.infrastructure.notifications.mock import MockSender
from passport.settings import Settings


def build_sms_sender(
    settings: Settings, client: Optional[httpx.AsyncClient] = None
) -> NotificationSender:
    # dev never talks to a real provider
    if settings.app_env == "dev" or settings.sms_provider == "mock":
        return MockSender("sms")
    if settings.sms_provider == "http":
        return HttpSmsSender(
            settings.sms_base_url,
            sign_name=settings.sms_sign_name,
            template_mapping=settings.sms_template_mapping,
            client=client,
            timeout=settings.notify_timeout_seconds,
        )
    raise ValueError(f"unknown sms provider: {settings.sms_provider!r}")


def build_email_sender(
    settings: Settings, client: Optional[httpx.AsyncClient] = None
) -> NotificationSender:
    if settings.app_env == "dev" or settings.email_provider == "mock":
        return MockSender("email")
    if settings.email_provider == "http_smtp":
        templates = {
            name: EmailTemplate(subject=t.subject, body=t.body)
            for name, t in settings.email_templates.items()
        }
        return HttpSmtpEmailSender(
            settings.smtp_base_url,
            templates=templates,
            from_address=settings.email_from,
            client=client,
            timeout=settings.notify_timeout_seconds,
        )
    raise ValueError(f"unknown email provider: {settings.email_provider!r}")
