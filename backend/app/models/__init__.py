"""
VideoAPI - Database Models
Declarative tables (schema bootstrap only) and the descriptors the storage engine serves.
"""
from app.models.descriptor import Descriptor
from app.models.camera import CameraTable, CAMERAS
from app.models.media import VideoTable, PictureTable, VIDEOS, PICTURES
from app.models.alert import AlertTable, ALERTS
from app.models.user import UserTable, USERS

__all__ = [
    "Descriptor",
    "CameraTable",
    "CAMERAS",
    "VideoTable",
    "PictureTable",
    "VIDEOS",
    "PICTURES",
    "AlertTable",
    "ALERTS",
    "UserTable",
    "USERS",
]
