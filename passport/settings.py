from functools import lru_cache
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class OtpSceneSettings(BaseModel):
    code_length: int = 6
    expires_in_seconds: int = 300
    resend_interval_seconds: int = 60
    template: str


class EmailTemplateSettings(BaseModel):
    subject: str
    body: str


def _default_phone_scenes() -> dict[str, OtpSceneSettings]:
    return {
        "login": OtpSceneSettings(template="login"),
        "bind_mobile": OtpSceneSettings(template="bind_mobile"),
        "reset_password": OtpSceneSettings(template="reset_password"),
    }


def _default_email_scenes() -> dict[str, OtpSceneSettings]:
    return {
        "bind_email": OtpSceneSettings(template="bind_email"),
        "reset_password": OtpSceneSettings(template="reset_password"),
    }


def _default_email_templates() -> dict[str, EmailTemplateSettings]:
    return {
        "bind_email": EmailTemplateSettings(
            subject="Confirm your email", body="Your verification code is {code}"
        ),
        "reset_password": EmailTemplateSettings(
            subject="Reset your password", body="Your reset code is {code}"
        ),
    }


class Settings(BaseSettings):
    # App
    app_env: Literal["dev", "test", "prod"] = "dev"
    log_level: str = "INFO"

    # Infra
    redis_url: str = "redis://redis:6379/0"

    # Tokens
    jwt_secret: str = "change-me-in-production"
    token_ttl_seconds: int = 7 * 24 * 3600

    # OTP scenes
    otp_phone_scenes: dict[str, OtpSceneSettings] = _default_phone_scenes()
    otp_email_scenes: dict[str, OtpSceneSettings] = _default_email_scenes()

    # Notifications
    sms_provider: Literal["mock", "http"] = "mock"
    sms_base_url: str = "http://sms-gateway:8080"
    sms_sign_name: str = ""
    sms_template_mapping: dict[str, str] = {}
    email_provider: Literal["mock", "http_smtp"] = "mock"
    smtp_base_url: str = "http://smtp-mock:8025"
    email_from: str = "no-reply@example.com"
    email_templates: dict[str, EmailTemplateSettings] = _default_email_templates()
    notify_timeout_seconds: float = 5.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.app_env == "prod"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
