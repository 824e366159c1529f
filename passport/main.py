from contextlib import asynccontextmanager
from fastapi import FastAPI

from passport.infrastructure.http.client import (
    close_http_client,
    get_http_client,
    open_http_client,
)
from passport.infrastructure.notifications.factory import (
    build_email_sender,
    build_sms_sender,
)
from passport.infrastructure.redis_cache.pool import close_redis, get_redis
from passport.logging import setup_logging
from passport.presentation.api import api
from passport.settings import get_settings

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    await open_http_client(timeout=settings.notify_timeout_seconds)
    get_redis()

    # Senders are picked ONCE here and share the HTTP client
    app.state.sms_sender = build_sms_sender(settings, get_http_client())
    app.state.email_sender = build_email_sender(settings, get_http_client())

    try:
        yield
    finally:
        # shutdown
        await close_http_client()
        await close_redis()


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title="Passport API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(api)
    return app


app = create_app()
