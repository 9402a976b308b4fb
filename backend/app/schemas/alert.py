"""
VideoAPI - Alert Schema
"""
from typing import List, Optional

from app.schemas.base import Model, UtcDatetime

MAX_NAME_LENGTH = 128
MAX_MESSAGE_LENGTH = 512


class Alert(Model):
    """
    An alert raised on a camera.

    On creation the name defaults to the (truncated) id and the message is
    cut to MAX_MESSAGE_LENGTH characters.
    """
    name: str = ""
    timestamp: Optional[UtcDatetime] = None
    camera: str = ""
    severity: str = ""
    message: str = ""
    acknowledged_at: Optional[UtcDatetime] = None
    resolved_at: Optional[UtcDatetime] = None

    def prepare_create(self) -> List[str]:
        if not self.name:
            self.name = self.id[:MAX_NAME_LENGTH]
        self.message = self.message[:MAX_MESSAGE_LENGTH]
        self.require("name", "timestamp", "camera", "severity", "message")
        columns = super().prepare_create()
        columns.extend(["name", "timestamp", "camera", "severity", "message"])
        if self.acknowledged_at is not None:
            columns.append("acknowledged_at")
        if self.resolved_at is not None:
            columns.append("resolved_at")
        return columns

    def prepare_update(self, id: str) -> List[str]:
        self.message = self.message[:MAX_MESSAGE_LENGTH]
        columns = super().prepare_update(id)
        columns.extend(self.present_columns(
            mandatory=("name", "severity", "message"),
            nullable=("acknowledged_at", "resolved_at"),
        ))
        return columns
