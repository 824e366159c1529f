from typing import Annotated

from fastapi import APIRouter, Depends

from passport.application.logout import logout
from passport.application.token_service import TokenService
from passport.domain.entities import TokenRecord
from passport.domain.errors import DomainError
from passport.presentation.dependencies import (
    get_bearer_token,
    get_current_session,
    get_token_service,
)
from passport.presentation.errors import to_http_exception
from passport.schemas.responses import OkOut, SessionOut

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get("", response_model=list[SessionOut])
async def get_sessions(
    current: Annotated[TokenRecord, Depends(get_current_session)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    try:
        records = await tokens.list_sessions(current.user_id)
    except DomainError as e:
        raise to_http_exception(e)
    return [
        SessionOut(
            jti=r.jti,
            issued_at=r.issued_at,
            expires_at=r.expires_at,
            current=r.jti == current.jti,
        )
        for r in records
    ]


@router.delete("", response_model=OkOut)
async def delete_all_sessions(
    current: Annotated[TokenRecord, Depends(get_current_session)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    try:
        await tokens.revoke_all(current.user_id)
    except DomainError as e:
        raise to_http_exception(e)
    return OkOut()


@router.delete("/current", response_model=OkOut)
async def delete_current_session(
    token: Annotated[str, Depends(get_bearer_token)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    try:
        await logout(tokens, token)
    except DomainError as e:
        raise to_http_exception(e)
    return OkOut()


@router.delete("/{jti}", response_model=OkOut)
async def delete_session(
    jti: str,
    current: Annotated[TokenRecord, Depends(get_current_session)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    try:
        await tokens.revoke_session(current.user_id, jti)
    except DomainError as e:
        raise to_http_exception(e)
    return OkOut()
