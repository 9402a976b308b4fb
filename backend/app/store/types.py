"""
VideoAPI - Column Type Codecs

Each column declares a DbType that turns a filter literal into a SQL
condition with a single '?' placeholder plus the value to bind. The literal
NULL is special: it never reaches a codec and becomes IS [NOT] NULL.
"""
import re
from datetime import datetime, timezone
from typing import Any, Dict, Protocol, Tuple

from pydantic import TypeAdapter, ValidationError

from app.crud.operator import Operator
from app.store.errors import InvalidLiteralError, UnsupportedOperatorError

NULL_LITERAL = "NULL"

_SQL_OPERATORS = {
    Operator.EQ: "=",
    Operator.NE: "<>",
    Operator.GT: ">",
    Operator.LT: "<",
    Operator.GE: ">=",
    Operator.LE: "<=",
    Operator.LIKE: "LIKE",
}

_INTEGER = re.compile(r"^[+-]?\d+$")
_RFC3339 = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$", re.IGNORECASE)
_datetime_adapter = TypeAdapter(datetime)


def sql_op(operator: Operator) -> str:
    try:
        return _SQL_OPERATORS[operator]
    except KeyError:
        raise UnsupportedOperatorError(f"operator '{operator.value}' is not supported here") from None


def null_condition(field: str, operator: Operator) -> str:
    if operator == Operator.EQ:
        return f"{field} IS NULL"
    if operator == Operator.NE:
        return f"{field} IS NOT NULL"
    raise UnsupportedOperatorError(f"operator '{operator.value}' cannot be used with NULL")


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC3339 timestamp with an explicit offset into UTC."""
    if not _RFC3339.match(value):
        raise InvalidLiteralError(f"'{value}' is not an RFC3339 timestamp")
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        raise InvalidLiteralError(f"'{value}' is not an RFC3339 timestamp") from None
    return parsed.astimezone(timezone.utc)


class DbType(Protocol):
    def where(self, field: str, operator: Operator, value: str) -> Tuple[str, Any]:
        ...


class StringDbType:
    def where(self, field: str, operator: Operator, value: str) -> Tuple[str, Any]:
        return f"{field} {sql_op(operator)} ?", value


class IntDbType:
    def where(self, field: str, operator: Operator, value: str) -> Tuple[str, Any]:
        if not _INTEGER.match(value):
            raise InvalidLiteralError(f"'{value}' is not an integer")
        return f"{field} {sql_op(operator)} ?", int(value)


class TimeDbType:
    def where(self, field: str, operator: Operator, value: str) -> Tuple[str, Any]:
        condition = f"{field} {sql_op(operator)} ?"
        return condition, parse_timestamp(value)


class JsonDbType:
    """JSON text column, only searchable by substring."""

    def where(self, field: str, operator: Operator, value: str) -> Tuple[str, Any]:
        if operator not in (Operator.EQ, Operator.LIKE):
            raise UnsupportedOperatorError(f"operator '{operator.value}' is not supported on json column '{field}'")
        return f"{field} LIKE ?", f"%{value}%"


FilterSet = Dict[str, DbType]
