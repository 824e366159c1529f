from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class OkOut(BaseModel):
    status: Literal["ok"] = "ok"


class SendCodeOut(BaseModel):
    expires_at: datetime = Field(..., description="When the sent code stops working")
    debug: dict[str, str] | None = None


class SessionOut(BaseModel):
    jti: str
    issued_at: datetime
    expires_at: datetime
    current: bool = False
