"""
VideoAPI - Media Schema
Videos and pictures share the same record; tags are stored as JSON text.
"""
import json
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator

from app.schemas.base import Model, UtcDatetime


class Media(Model):
    timestamp: Optional[UtcDatetime] = None
    camera: str = ""
    tags: Optional[List[str]] = None
    media_url: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value: Any) -> Any:
        if isinstance(value, (str, bytes)):
            return json.loads(value) if value else None
        return value

    def prepare_create(self) -> List[str]:
        self.require("timestamp", "camera")
        columns = super().prepare_create()
        columns.extend(["timestamp", "camera"])
        if self.tags is not None:
            columns.append("tags")
        if self.media_url:
            columns.append("media_url")
        return columns

    def prepare_update(self, id: str) -> List[str]:
        columns = super().prepare_update(id)
        columns.extend(self.present_columns(
            mandatory=("timestamp", "camera"),
            nullable=("tags", "media_url"),
        ))
        return columns

    def column_value(self, column: str) -> Any:
        if column == "tags":
            return None if self.tags is None else json.dumps(self.tags)
        return super().column_value(column)


class MediaUploaded(BaseModel):
    """Reply to a successful upload."""
    id: str
    media_url: str
