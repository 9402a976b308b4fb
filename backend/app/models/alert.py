"""
VideoAPI - Alert Model
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.descriptor import Descriptor
from app.store.types import StringDbType, TimeDbType


class AlertTable(Base):
    """
    Alert table, fed by users or by the Alertmanager webhook.

    acknowledged_at / resolved_at stay NULL until the alert is handled.
    """
    __tablename__ = "alerts"

    id: Mapped[str] = mapped_column(String(256), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    camera: Mapped[str] = mapped_column(String(128), ForeignKey("cameras.id"), nullable=False, index=True)
    severity: Mapped[str] = mapped_column(String(64), nullable=False)
    message: Mapped[str] = mapped_column(String(512), nullable=False)
    acknowledged_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


ALERTS = Descriptor(
    table_name="alerts",
    filter_set={
        "id": StringDbType(),
        "created_at": TimeDbType(),
        "modified_at": TimeDbType(),
        "name": StringDbType(),
        "timestamp": TimeDbType(),
        "camera": StringDbType(),
        "severity": StringDbType(),
        "message": StringDbType(),
        "acknowledged_at": TimeDbType(),
        "resolved_at": TimeDbType(),
    },
    table=AlertTable.__table__,
)
