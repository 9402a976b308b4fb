"""
VideoAPI - User Model
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.descriptor import Descriptor
from app.store.types import StringDbType, TimeDbType


class UserTable(Base):
    """
    User table.

    The role is stored as its name (READ_ONLY, READ_WRITE, ADMIN, SERVICE);
    hash holds the bcrypt hash of the password.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    hash: Mapped[str] = mapped_column(String(256), nullable=False)


# hash is never filterable
USERS = Descriptor(
    table_name="users",
    filter_set={
        "id": StringDbType(),
        "created_at": TimeDbType(),
        "modified_at": TimeDbType(),
        "name": StringDbType(),
        "role": StringDbType(),
    },
    table=UserTable.__table__,
)
