from typing import Callable

from passport.application.directory_failures import directory_failures
from passport.application.token_service import TokenService
from passport.domain.errors import NotFoundError, PasswordInvalid
from passport.domain.ports.user_directory import UserDirectoryPort


async def change_password(
    tokens: TokenService,
    users: UserDirectoryPort,
    user_id: str,
    old_password: str,
    new_password: str,
    hash_password: Callable[[str], str],
    verify_password: Callable[[str, str], bool],
) -> None:
    with directory_failures("change_password", user_id=user_id):
        current_hash = await users.get_password_hash(user_id)
        if current_hash is None:
            raise NotFoundError("user not found")
        if not verify_password(old_password, current_hash):
            raise PasswordInvalid()

        await users.update_password(user_id, hash_password(new_password))
    # every outstanding session was opened with the old password
    await tokens.revoke_all(user_id)
