class DomainError(Exception):
    """Base class for all domain-level errors."""

    message = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class ValidationError(DomainError):
    """Malformed input."""

    message = "invalid request"


class SceneNotFound(ValidationError):
    """No OTP scene with that name is configured for the channel."""

    message = "unknown verification scene"


class RateLimitError(DomainError):
    """A new code was requested before the resend interval elapsed."""

    message = "sending too frequently, please retry later"


class NotFoundError(DomainError):
    """No such session or user."""

    message = "not found"


class ExpiredError(DomainError):
    """
    Natural expiry, revocation and lockout all end up here.
    Callers must not be able to tell them apart.
    """

    message = "expired"


class TokenExpired(ExpiredError):
    message = "invalid or expired token"


class OtpExpired(ExpiredError):
    message = "verification code expired or not sent"


class InvalidCredentialError(DomainError):
    """Wrong secret supplied (below any lockout threshold)."""

    message = "invalid credentials"


class OtpInvalid(InvalidCredentialError):
    message = "invalid verification code"


class InternalError(DomainError):
    """Cache, store or transport failure. Details are only logged."""

    message = "internal error"


class SendError(InternalError):
    message = "failed to send verification code"


class TemplateNotConfigured(InternalError):
    message = "notification template not configured"


class PasswordInvalid(InvalidCredentialError):
    message = "invalid username or password"


class ConflictError(DomainError):
    """The requested change clashes with existing state."""

    message = "conflict"


class MobileAlreadyBound(ConflictError):
    message = "phone number is already bound to an account"


class ForbiddenError(DomainError):
    """The account exists but may not perform the action."""

    message = "forbidden"


class UserDisabled(ForbiddenError):
    message = "account is disabled"
