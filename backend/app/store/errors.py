"""
VideoAPI - Storage Errors

Every storage failure reports the outcome of the write it interrupted:
FAILED means nothing changed, INDETERMINATE means the commit itself failed
and the caller cannot know whether the change was persisted.
"""
import enum
import json
from typing import Any, Optional

from fastapi import status

from app.crud.errors import CrudError


class WriteOutcome(str, enum.Enum):
    """Result of a write as seen by the caller."""
    COMMITTED = "committed"
    FAILED = "failed"
    INDETERMINATE = "indeterminate"


class StoreError(CrudError):
    outcome: WriteOutcome = WriteOutcome.FAILED


class InvalidRecordError(StoreError):
    """A record is missing a mandatory attribute or carries an invalid one."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid record"


class MissingIdError(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "missing resource id"


class UnknownColumnError(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "column does not exist"


class UnsupportedOperatorError(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "operator not supported for this column"


class InvalidLiteralError(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "value does not match the column type"


class NoRowsError(Exception):
    """Raised by a querier when a single-row query matched nothing."""


class QueryError(StoreError):
    """
    A statement failed. Only the short message is shown to clients; the SQL,
    its parameters and the driver error are kept for the logs.
    """

    def __init__(self, message: str, query: str = "", params: Any = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.query = query
        self.params = params
        self.cause = cause

    def __str__(self) -> str:
        params = json.dumps(self.params, default=str)
        return f"{self.message}\n\tquery: {self.query}\n\tparams: {params}\n\tcause: {self.cause}"


class ResourceNotFoundError(QueryError):
    status_code = status.HTTP_404_NOT_FOUND


class CommitError(QueryError):
    """The transaction commit failed; the write may or may not be persisted."""
    outcome = WriteOutcome.INDETERMINATE
