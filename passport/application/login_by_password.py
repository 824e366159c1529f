from typing import Callable

from passport.application.directory_failures import directory_failures
from passport.application.token_service import TokenService
from passport.domain.entities import OtpKind
from passport.domain.errors import NotFoundError, PasswordInvalid, UserDisabled
from passport.domain.ports.user_directory import UserDirectoryPort


async def login_by_password(
    tokens: TokenService,
    users: UserDirectoryPort,
    username: str,
    password: str,
    verify_password: Callable[[str, str], bool],
) -> str:
    """`username` may also be the phone number bound to the account."""
    username = (username or "").strip()
    if not username or not password:
        raise PasswordInvalid()

    with directory_failures("login_by_password"):
        user_id = await users.find_id_by_username(username)
        if user_id is None:
            user_id = await users.find_id_by_receiver(OtpKind.PHONE, username)
        if user_id is None:
            raise NotFoundError("user not found")
        password_hash = await users.get_password_hash(user_id)
        if password_hash is None or not verify_password(password, password_hash):
            raise PasswordInvalid()
        if not await users.is_available(user_id):
            raise UserDisabled()

    return await tokens.issue(user_id)
