"""
VideoAPI - API Routers
"""
from app.routers.auth import router as auth_router
from app.routers.health import router as health_router
from app.routers.hooks import router as hooks_router
from app.routers.resources import (
    alert_router,
    camera_router,
    picture_router,
    user_router,
    video_router,
)

__all__ = [
    "auth_router",
    "health_router",
    "hooks_router",
    "alert_router",
    "camera_router",
    "picture_router",
    "user_router",
    "video_router",
]
