from fastapi import HTTPException, status

from passport.domain.errors import (
    ConflictError,
    DomainError,
    ExpiredError,
    ForbiddenError,
    InternalError,
    InvalidCredentialError,
    NotFoundError,
    RateLimitError,
    TokenExpired,
    ValidationError,
)

# first match wins, so subclasses go before their bases
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (TokenExpired, status.HTTP_401_UNAUTHORIZED),
    (ExpiredError, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentialError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (RateLimitError, status.HTTP_429_TOO_MANY_REQUESTS),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
)


def to_http_exception(err: DomainError) -> HTTPException:
    if isinstance(err, InternalError):
        # never echo infrastructure details
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=err.message
        )
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(err, error_type):
            return HTTPException(status_code=code, detail=str(err))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err))
