"""
VideoAPI - Resource Stores
One SQL engine per table, all sharing the application's database engine.
These are unpoliced: request handlers wrap them in an access policy.
"""
from typing import Type

from app.database import executor, limiter, querier
from app.models import ALERTS, CAMERAS, PICTURES, USERS, VIDEOS, Descriptor
from app.schemas import Alert, Camera, Media, User
from app.store.sqlresource import RecordT, SQLResource


def build_store(model: Type[RecordT], descriptor: Descriptor) -> SQLResource[RecordT]:
    return SQLResource(model, querier, executor, descriptor.table_name, descriptor.filter_set, limiter)


user_store = build_store(User, USERS)
camera_store = build_store(Camera, CAMERAS)
video_store = build_store(Media, VIDEOS)
picture_store = build_store(Media, PICTURES)
alert_store = build_store(Alert, ALERTS)
