from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends

from passport.application.otp_service import OtpService
from passport.domain.errors import DomainError
from passport.infrastructure.diagnostics import DebugInfo
from passport.presentation.dependencies import get_debug_info, get_otp_service
from passport.presentation.errors import to_http_exception
from passport.schemas.requests import SendCodeIn, VerifyCodeIn
from passport.schemas.responses import OkOut, SendCodeOut

router = APIRouter(prefix="/otp", tags=["OTP"])

Kind = Literal["phone", "email"]


@router.post("/{kind}/send", response_model=SendCodeOut)
async def post_send_code(
    kind: Kind,
    body: SendCodeIn,
    otp: Annotated[OtpService, Depends(get_otp_service)],
    debug: Annotated[Optional[DebugInfo], Depends(get_debug_info)],
):
    try:
        expires_at = await otp.send_code(kind, body.scene, body.receiver, debug=debug)
    except DomainError as e:
        raise to_http_exception(e)
    return SendCodeOut(expires_at=expires_at, debug=debug.as_dict() if debug else None)


@router.post("/{kind}/verify", response_model=OkOut)
async def post_verify_code(
    kind: Kind,
    body: VerifyCodeIn,
    otp: Annotated[OtpService, Depends(get_otp_service)],
):
    try:
        await otp.verify_code(kind, body.scene, body.receiver, body.code)
    except DomainError as e:
        raise to_http_exception(e)
    return OkOut()
