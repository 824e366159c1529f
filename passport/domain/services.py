# passport/domain/services.py
from __future__ import annotations

import hmac
import secrets
import uuid

DIGITS = "0123456789"
DEFAULT_CODE_LENGTH = 6
MAX_CODE_LENGTH = 10


def clamp_code_length(length: int) -> int:
    """Non-positive -> default; anything above the max is cut down to it."""
    if length <= 0:
        return DEFAULT_CODE_LENGTH
    return min(length, MAX_CODE_LENGTH)


def generate_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """Uniform random decimal code from the OS CSPRNG."""
    size = clamp_code_length(length)
    return "".join(secrets.choice(DIGITS) for _ in range(size))


def new_jti() -> str:
    return str(uuid.uuid4())


def secure_compare(a: str, b: str) -> bool:
    """
    Constant-time comparison for secrets.
    Accepts strings; falls back to bytes if needed.
    """
    try:
        # hmac.compare_digest supports str if types match
        return hmac.compare_digest(a, b)
    except TypeError:
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
