from passport.application.directory_failures import directory_failures
from passport.application.otp_service import OtpService
from passport.application.token_service import TokenService
from passport.domain.entities import OtpKind, OtpTarget
from passport.domain.errors import NotFoundError, UserDisabled
from passport.domain.ports.user_directory import UserDirectoryPort

LOGIN_SCENE = "login"


async def login_by_otp(
    otp: OtpService,
    tokens: TokenService,
    users: UserDirectoryPort,
    kind: OtpKind | str,
    receiver: str,
    code: str,
    scene: str = LOGIN_SCENE,
) -> str:
    target = OtpTarget(OtpKind.parse(kind), scene, receiver)
    await otp.verify_code(target.kind, scene, target.receiver, code)

    with directory_failures("login_by_otp", kind=target.kind.value):
        user_id = await users.find_id_by_receiver(target.kind, target.receiver)
        if user_id is None:
            raise NotFoundError("user not found")
        if not await users.is_available(user_id):
            raise UserDisabled()
    return await tokens.issue(user_id)
