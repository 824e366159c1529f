from passport.application.directory_failures import directory_failures
from passport.application.otp_service import OtpService
from passport.domain.entities import OtpKind, OtpTarget
from passport.domain.errors import MobileAlreadyBound
from passport.domain.ports.user_directory import UserDirectoryPort

BIND_SCENE = "bind_mobile"


async def bind_mobile(
    otp: OtpService,
    users: UserDirectoryPort,
    user_id: str,
    phone: str,
    code: str,
    scene: str = BIND_SCENE,
) -> None:
    """
    Attach a phone number to the signed-in user after proving ownership of it.

    A number already bound to any account, the caller's own included, is
    rejected with MobileAlreadyBound.
    """
    target = OtpTarget(OtpKind.PHONE, scene, phone)
    await otp.verify_code(target.kind, scene, target.receiver, code)

    with directory_failures("bind_mobile", user_id=user_id):
        owner = await users.find_id_by_receiver(OtpKind.PHONE, target.receiver)
        if owner is not None:
            raise MobileAlreadyBound()
        await users.update_phone(user_id, target.receiver)


async def update_mobile(
    otp: OtpService,
    users: UserDirectoryPort,
    user_id: str,
    phone: str,
    code: str,
    scene: str = BIND_SCENE,
) -> None:
    """Replace the user's phone number; same checks as a first binding."""
    await bind_mobile(otp, users, user_id, phone, code, scene=scene)
