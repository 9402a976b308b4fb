"""
VideoAPI - Camera Model
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.descriptor import Descriptor
from app.store.types import StringDbType, TimeDbType


class CameraTable(Base):
    """
    Camera table.

    Attributes:
        id: Unique identifier chosen by the client
        name: Human-readable camera name
        latitude / longitude: Camera position
        local_path: Where the camera stores its footage on its host
    """
    __tablename__ = "cameras"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    local_path: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    def __repr__(self) -> str:
        return f"<CameraTable(id='{self.id}', name='{self.name}')>"


CAMERAS = Descriptor(
    table_name="cameras",
    filter_set={
        "id": StringDbType(),
        "created_at": TimeDbType(),
        "modified_at": TimeDbType(),
        "name": StringDbType(),
        "local_path": StringDbType(),
    },
    table=CameraTable.__table__,
)
