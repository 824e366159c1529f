import pytest

from passport.domain.errors import (
    InternalError,
    MobileAlreadyBound,
    NotFoundError,
    OtpExpired,
    OtpInvalid,
    PasswordInvalid,
    RateLimitError,
    SceneNotFound,
    SendError,
    TokenExpired,
    UserDisabled,
    ValidationError,
)
from passport.presentation.errors import to_http_exception


@pytest.mark.parametrize(
    "err, status_code",
    [
        (TokenExpired(), 401),
        (OtpExpired(), 400),
        (OtpInvalid(), 400),
        (PasswordInvalid(), 400),
        (ValidationError(), 400),
        (SceneNotFound(), 400),
        (RateLimitError(), 429),
        (NotFoundError(), 404),
        (MobileAlreadyBound(), 409),
        (UserDisabled(), 403),
        (InternalError(), 500),
    ],
)
def test_status_for_each_error(err, status_code):
    exc = to_http_exception(err)
    assert exc.status_code == status_code
    assert exc.detail == str(err)


def test_internal_error_detail_never_leaks_cause():
    exc = to_http_exception(SendError("smtp 10.0.0.3 refused"))
    assert exc.status_code == 500
    assert exc.detail == "failed to send verification code"
