from pydantic import BaseModel, Field


class SendCodeIn(BaseModel):
    receiver: str = Field(..., description="Phone number or email", max_length=255)
    scene: str = Field(..., description="Usage context, e.g. login", max_length=64)


class VerifyCodeIn(BaseModel):
    receiver: str = Field(..., max_length=255)
    scene: str = Field(..., max_length=64)
    code: str = Field(..., min_length=1, max_length=10)
