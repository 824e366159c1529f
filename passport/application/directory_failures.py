import logging
from contextlib import contextmanager
from typing import Iterator

from passport.domain.errors import DomainError, InternalError

logger = logging.getLogger(__name__)


@contextmanager
def directory_failures(action: str, **context) -> Iterator[None]:
    """User directory errors are logged in full; callers only see InternalError."""
    try:
        yield
    except DomainError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("user directory failure", extra={"action": action, **context})
        raise InternalError() from exc
