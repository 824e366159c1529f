from fastapi import APIRouter

from passport.presentation.routers.v1.otp import router as otp_router
from passport.presentation.routers.v1.sessions import router as sessions_router
from passport.presentation.routes.health import router as health_router

api = APIRouter()
api.include_router(health_router)

# Add all v1 routers here
routers = (otp_router, sessions_router)
for router in routers:
    api.include_router(router, prefix="/v1")
