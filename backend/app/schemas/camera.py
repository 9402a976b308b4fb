"""
VideoAPI - Camera Schema
"""
from typing import List, Optional

from app.schemas.base import Model


class Camera(Model):
    """A camera; latitude and longitude are mandatory and never zero."""
    name: str = ""
    latitude: float = 0
    longitude: float = 0
    local_path: Optional[str] = None

    def prepare_create(self) -> List[str]:
        self.require("name", "latitude", "longitude")
        columns = super().prepare_create()
        columns.extend(["name", "latitude", "longitude"])
        if self.local_path:
            columns.append("local_path")
        return columns

    def prepare_update(self, id: str) -> List[str]:
        columns = super().prepare_update(id)
        columns.extend(self.present_columns(
            mandatory=("name", "latitude", "longitude"),
            nullable=("local_path",),
        ))
        return columns
