from passport.application.token_service import TokenService


async def logout(tokens: TokenService, token: str) -> None:
    """Revoke the session behind the presented token."""
    record = await tokens.authenticate(token)
    await tokens.revoke(record.jti)
