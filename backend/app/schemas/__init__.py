"""
VideoAPI - Pydantic Schemas
"""
from app.schemas.base import Model
from app.schemas.camera import Camera
from app.schemas.media import Media, MediaUploaded
from app.schemas.alert import Alert
from app.schemas.user import User, Role, LoginRequest, LoginResponse

__all__ = ["Model", "Camera", "Media", "MediaUploaded", "Alert", "User", "Role", "LoginRequest", "LoginResponse"]
