"""
VideoAPI - Resource Routers
Wires each table's store, access policy and JSON adaptor into the CRUD routes.
"""
from pathlib import Path

from app.config import get_settings
from app.crud.handler import build_crud_router
from app.policy import AlertPolicy, CameraPolicy, MediaPolicy, UserPolicy
from app.schemas import Alert, Camera, Media, User
from app.services.auth import Claims
from app.services.media import MediaService
from app.services.stores import alert_store, camera_store, picture_store, user_store, video_store
from app.store.adaptor import Adaptor

settings = get_settings()

VIDEO_FOLDER = "videos"
PICTURE_FOLDER = "pictures"

video_media = MediaService(
    video_store,
    tmp_folder=settings.tmp_path,
    final_folder=str(Path(settings.media_path) / VIDEO_FOLDER),
    mime_types=settings.video_mime_types,
    ffmpeg_path=settings.ffmpeg_path,
)

picture_media = MediaService(
    picture_store,
    tmp_folder=settings.tmp_path,
    final_folder=str(Path(settings.media_path) / PICTURE_FOLDER),
    mime_types=settings.picture_mime_types,
)


def users(claims: Claims) -> Adaptor[User]:
    return Adaptor(User, UserPolicy(user_store, claims))


def cameras(claims: Claims) -> Adaptor[Camera]:
    return Adaptor(Camera, CameraPolicy(camera_store, claims))


def videos(claims: Claims) -> Adaptor[Media]:
    return Adaptor(Media, MediaPolicy(video_store, claims))


def pictures(claims: Claims) -> Adaptor[Media]:
    return Adaptor(Media, MediaPolicy(picture_store, claims))


def alerts(claims: Claims) -> Adaptor[Alert]:
    return Adaptor(Alert, AlertPolicy(alert_store, claims))


user_router = build_crud_router("/user", users)
camera_router = build_crud_router("/camera", cameras)
video_router = build_crud_router("/video", videos, media=video_media)
picture_router = build_crud_router("/picture", pictures, media=picture_media)
alert_router = build_crud_router("/alert", alerts)
