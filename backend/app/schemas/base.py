"""
VideoAPI - Base Record Schema

Records are pydantic models that know which columns they write. Updates are
presence based: a column is written only when its field was sent.
Mandatory columns ignore empty values (they can never be cleared), nullable
columns accept an explicit null, which clears them.
"""
import enum
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Iterable, List, Optional, Sequence

from pydantic import AfterValidator, BaseModel

from app.store.errors import InvalidRecordError


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes read back from the database are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


def has_value(value: Any) -> bool:
    return value is not None and value != "" and value != 0


class Model(BaseModel):
    """Attributes shared by every table."""
    id: str = ""
    created_at: Optional[UtcDatetime] = None
    modified_at: Optional[UtcDatetime] = None

    def get_id(self) -> str:
        return self.id

    def require(self, *fields: str) -> None:
        for field in fields:
            if not has_value(getattr(self, field)):
                raise InvalidRecordError(f"missing mandatory attribute {field}")

    def prepare_create(self) -> List[str]:
        self.require("id")
        now = utcnow()
        self.created_at = now
        self.modified_at = now
        return ["id", "created_at", "modified_at"]

    def prepare_update(self, id: str) -> List[str]:
        if not id:
            raise InvalidRecordError("missing mandatory attribute id")
        self.id = id
        self.modified_at = utcnow()
        return ["modified_at"]

    def present_columns(self, mandatory: Iterable[str] = (), nullable: Iterable[str] = ()) -> List[str]:
        """Columns to write on update, given which fields the request carried."""
        sent = self.model_fields_set
        columns = [field for field in mandatory if field in sent and has_value(getattr(self, field))]
        columns.extend(field for field in nullable if field in sent)
        return columns

    def column_value(self, column: str) -> Any:
        value = getattr(self, column)
        if isinstance(value, enum.Enum):
            return value.value
        return value

    def bind_params(self, columns: Sequence[str]) -> Dict[str, Any]:
        params = {"id": self.id}
        params.update((column, self.column_value(column)) for column in columns)
        return params
