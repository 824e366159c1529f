from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from passport.domain.errors import ValidationError


class OtpKind(str, Enum):
    PHONE = "phone"
    EMAIL = "email"

    @classmethod
    def parse(cls, value: "OtpKind | str") -> "OtpKind":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"unsupported channel: {value!r}") from None


@dataclass(frozen=True)
class TokenRecord:
    jti: str
    user_id: str
    issued_at: datetime
    expires_at: datetime
    signed_value: str

    def __post_init__(self):
        if self.expires_at <= self.issued_at:
            raise ValueError("expires_at must be after issued_at")

    def remaining(self, now: datetime) -> timedelta:
        return self.expires_at - now

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def to_json(self) -> str:
        return json.dumps(
            {
                "jti": self.jti,
                "user_id": self.user_id,
                "issued_at": self.issued_at.isoformat(),
                "expires_at": self.expires_at.isoformat(),
                "signed_value": self.signed_value,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "TokenRecord":
        data = json.loads(raw)
        return cls(
            jti=data["jti"],
            user_id=data["user_id"],
            issued_at=datetime.fromisoformat(data["issued_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
            signed_value=data["signed_value"],
        )


@dataclass(frozen=True)
class OtpScene:
    """Per-scene OTP policy. Durations are independent of each other."""

    name: str
    code_length: int
    code_expiry: timedelta
    resend_interval: timedelta
    template: str


@dataclass(frozen=True)
class OtpTarget:
    kind: OtpKind
    scene: str
    receiver: str

    def __post_init__(self):
        receiver = (self.receiver or "").strip()
        if self.kind is OtpKind.EMAIL:
            receiver = receiver.lower()
        if not receiver:
            raise ValidationError("receiver is required")
        if not self.scene:
            raise ValidationError("scene is required")
        # the scene sits between two separators in the cache key
        if ":" in self.scene:
            raise ValidationError("scene must not contain ':'")
        object.__setattr__(self, "receiver", receiver)

    def key_suffix(self) -> str:
        return f"{self.kind.value}:{self.scene}:{self.receiver}"
