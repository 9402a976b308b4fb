"""
VideoAPI - User Schema
The password is hashed before it is written and never serialized back.
"""
import enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field

from app.schemas.base import Model, has_value
from app.services.passwords import hash_password


class Role(str, enum.Enum):
    """User roles for RBAC."""
    READ_ONLY = "READ_ONLY"
    READ_WRITE = "READ_WRITE"
    ADMIN = "ADMIN"
    SERVICE = "SERVICE"


class User(Model):
    name: str = ""
    role: Optional[Role] = None
    # plain password on input, bcrypt hash when read from the "hash" column
    password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("password", "hash"),
        exclude=True,
    )

    def prepare_create(self) -> List[str]:
        self.require("name", "password")
        if self.role is None:
            self.role = Role.READ_ONLY
        self.password = hash_password(self.password)
        columns = super().prepare_create()
        columns.extend(["name", "role", "hash"])
        return columns

    def prepare_update(self, id: str) -> List[str]:
        columns = super().prepare_update(id)
        columns.extend(self.present_columns(mandatory=("name", "role")))
        if "password" in self.model_fields_set and has_value(self.password):
            self.password = hash_password(self.password)
            columns.append("hash")
        return columns

    def column_value(self, column: str) -> Any:
        if column == "hash":
            return self.password
        return super().column_value(column)


class LoginRequest(BaseModel):
    id: str
    password: str


class LoginResponse(BaseModel):
    id: str
    name: str
    role: Role
    token: str
