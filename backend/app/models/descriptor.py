"""
VideoAPI - Table Descriptors
"""
from typing import NamedTuple

from sqlalchemy import Table

from app.store.types import FilterSet


class Descriptor(NamedTuple):
    """
    Everything needed to serve a table.

    filter_set lists the columns clients may filter and sort by; table is the
    declarative table, only used to create the schema on startup.
    """
    table_name: str
    filter_set: FilterSet
    table: Table
