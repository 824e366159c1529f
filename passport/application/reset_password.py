from typing import Callable

from passport.application.directory_failures import directory_failures
from passport.application.otp_service import OtpService
from passport.application.token_service import TokenService
from passport.domain.entities import OtpKind, OtpTarget
from passport.domain.errors import NotFoundError
from passport.domain.ports.user_directory import UserDirectoryPort

RESET_SCENE = "reset_password"


async def reset_password(
    otp: OtpService,
    tokens: TokenService,
    users: UserDirectoryPort,
    kind: OtpKind | str,
    receiver: str,
    code: str,
    new_password: str,
    hash_password: Callable[[str], str],
    scene: str = RESET_SCENE,
) -> str:
    """
    Reset the password of the account that owns `receiver`.

    The caller is usually not logged in, so the sessions revoked are those of
    the user resolved from the receiver, never of any ambient session.
    Returns the target user id.
    """
    target = OtpTarget(OtpKind.parse(kind), scene, receiver)
    await otp.verify_code(target.kind, scene, target.receiver, code)

    with directory_failures("reset_password", kind=target.kind.value):
        target_user_id = await users.find_id_by_receiver(target.kind, target.receiver)
        if target_user_id is None:
            raise NotFoundError("user not found")
        await users.update_password(target_user_id, hash_password(new_password))

    await tokens.revoke_all(target_user_id)
    return target_user_id
