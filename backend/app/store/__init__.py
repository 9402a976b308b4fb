"""
VideoAPI - Storage Layer
Generic SQL engine, column codecs and the database drivers behind them
"""
from app.store.adaptor import Adaptor
from app.store.errors import (
    CommitError,
    QueryError,
    ResourceNotFoundError,
    StoreError,
    WriteOutcome,
)
from app.store.sqlresource import Resource, SQLResource

__all__ = [
    "Adaptor",
    "CommitError",
    "QueryError",
    "Resource",
    "ResourceNotFoundError",
    "SQLResource",
    "StoreError",
    "WriteOutcome",
]
