"""
VideoAPI - Media Models
Videos and pictures live in separate tables with the same columns.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.database import Base
from app.models.descriptor import Descriptor
from app.store.types import FilterSet, JsonDbType, StringDbType, TimeDbType


class MediaColumns:
    """Columns shared by the videos and pictures tables."""
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    # JSON list of strings, stored as text
    tags: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    media_url: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)

    @declared_attr
    def camera(cls) -> Mapped[str]:
        return mapped_column(String(128), ForeignKey("cameras.id"), nullable=False, index=True)


class VideoTable(MediaColumns, Base):
    __tablename__ = "videos"


class PictureTable(MediaColumns, Base):
    __tablename__ = "pictures"


def _media_filters() -> FilterSet:
    return {
        "id": StringDbType(),
        "created_at": TimeDbType(),
        "modified_at": TimeDbType(),
        "timestamp": TimeDbType(),
        "camera": StringDbType(),
        "tags": JsonDbType(),
        "media_url": StringDbType(),
    }


VIDEOS = Descriptor(table_name="videos", filter_set=_media_filters(), table=VideoTable.__table__)
PICTURES = Descriptor(table_name="pictures", filter_set=_media_filters(), table=PictureTable.__table__)
