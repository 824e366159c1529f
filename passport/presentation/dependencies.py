from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from passport.application.otp_service import OtpService
from passport.application.token_service import TokenService
from passport.bootstrap import build_otp_service, build_token_service
from passport.domain.entities import TokenRecord
from passport.domain.errors import DomainError
from passport.infrastructure.diagnostics import DebugInfo
from passport.infrastructure.redis_cache.pool import get_redis
from passport.presentation.errors import to_http_exception
from passport.settings import get_settings

bearer_scheme = HTTPBearer()


def get_token_service() -> TokenService:
    return build_token_service(get_settings(), get_redis())


def get_otp_service(request: Request) -> OtpService:
    # senders are built once in app.main lifespan()
    return build_otp_service(
        get_settings(),
        get_redis(),
        sms_sender=request.app.state.sms_sender,
        email_sender=request.app.state.email_sender,
    )


def get_debug_info() -> Optional[DebugInfo]:
    if get_settings().is_production:
        return None
    return DebugInfo()


def get_bearer_token(
    auth: HTTPAuthorizationCredentials = Security(bearer_scheme),
) -> str:
    return auth.credentials


async def get_current_session(
    token: str = Depends(get_bearer_token),
    tokens: TokenService = Depends(get_token_service),
) -> TokenRecord:
    try:
        return await tokens.authenticate(token)
    except DomainError as e:
        raise to_http_exception(e)


async def get_current_user_id(
    session: TokenRecord = Depends(get_current_session),
) -> str:
    return session.user_id
