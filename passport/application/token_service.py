from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator

import jwt

from passport.domain import services as domain_services
from passport.domain.entities import TokenRecord
from passport.domain.errors import (
    DomainError,
    InternalError,
    NotFoundError,
    TokenExpired,
    ValidationError,
)
from passport.domain.ports.token_store import TokenStorePort

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "jti", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def _store_failures(action: str, **context) -> Iterator[None]:
    """Log infrastructure failures in full and surface a generic InternalError."""
    try:
        yield
    except DomainError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("token store failure", extra={"action": action, **context})
        raise InternalError() from exc


class TokenService:
    """
    Issues HS256 JWTs and pairs each one with a TTL-bounded record in the
    token store. A token is only accepted while both the signature and the
    record check out, so deleting the record revokes the token early.
    """

    def __init__(
        self,
        store: TokenStorePort,
        *,
        secret: str,
        ttl: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("secret is required")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._store = store
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    async def issue(self, user_id: str) -> str:
        if not user_id:
            raise ValidationError("user id is required")
        user_id = str(user_id)

        # JWT timestamps are whole seconds; keep the record in step with them
        now = self._clock().replace(microsecond=0)
        expires_at = now + self._ttl
        jti = domain_services.new_jti()
        claims = {
            "sub": user_id,
            "jti": jti,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }

        try:
            signed = jwt.encode(claims, self._secret, algorithm=ALGORITHM)
        except Exception as exc:  # noqa: BLE001
            logger.exception("token signing failed", extra={"user_id": user_id})
            raise InternalError() from exc

        record = TokenRecord(
            jti=jti,
            user_id=user_id,
            issued_at=now,
            expires_at=expires_at,
            signed_value=signed,
        )
        with _store_failures("save", user_id=user_id, jti=jti):
            await self._store.save(record)

        logger.info("issued token", extra={"user_id": user_id, "jti": jti})
        return signed

    async def authenticate(self, token: str) -> TokenRecord:
        """Return the stored record behind a token, or raise TokenExpired."""
        if not token:
            raise TokenExpired()
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError:
            raise TokenExpired() from None

        jti = claims["jti"]
        with _store_failures("get", jti=jti):
            record = await self._store.get(jti)

        if (
            record is None
            or record.is_expired(self._clock())
            or record.user_id != claims["sub"]
        ):
            raise TokenExpired()
        return record

    async def validate(self, token: str) -> str:
        record = await self.authenticate(token)
        return record.user_id

    async def revoke(self, jti: str) -> None:
        with _store_failures("revoke", jti=jti):
            record = await self._store.get(jti)
            if record is None:
                return
            await self._store.delete_one(record.user_id, jti)
        logger.info("revoked token", extra={"user_id": record.user_id, "jti": jti})

    async def revoke_all(self, user_id: str) -> None:
        with _store_failures("revoke_all", user_id=user_id):
            await self._store.delete_all(user_id)
        logger.info("revoked all tokens", extra={"user_id": user_id})

    async def list_sessions(self, user_id: str) -> list[TokenRecord]:
        with _store_failures("list", user_id=user_id):
            return await self._store.get_all(user_id)

    async def revoke_session(self, user_id: str, jti: str) -> None:
        """Revoke one of the caller's own sessions."""
        with _store_failures("revoke_session", user_id=user_id, jti=jti):
            record = await self._store.get(jti)
            if record is None or record.user_id != user_id:
                raise NotFoundError("session not found")
            await self._store.delete_one(user_id, jti)
        logger.info("revoked session", extra={"user_id": user_id, "jti": jti})
