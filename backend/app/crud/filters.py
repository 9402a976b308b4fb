"""
VideoAPI - Query String Grammar

List requests accept:
- q:<field>:<operator>=<value>  (repeatable; values of one key are OR-ed,
  different keys are AND-ed)
- sort=<column>                 (repeatable, first-seen order)
- asc=<t|true|y|yes>            (descending otherwise)
- offset=<int>, limit=<int>
"""
import string
from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from app.crud.errors import InvalidColumnError, InvalidFilterError, InvalidPaginationError
from app.crud.operator import Operator

FILTER_PREFIX = "q:"
DEFAULT_LIMIT = 100
MAX_LIMIT = 100
TRUTHY = frozenset({"t", "true", "y", "yes"})
COLUMN_CHARS = frozenset(string.ascii_letters + "_")


class Filter(BaseModel):
    """A single (field, operator) pair with the set of values it matches."""
    model_config = ConfigDict(frozen=True)

    field: str
    operator: Operator
    values: FrozenSet[str]


class ListQuery(BaseModel):
    """Everything a list request asks for, already validated."""
    filters: List[Filter] = []
    sort: List[str] = []
    ascending: bool = False
    offset: int = 0
    limit: int = DEFAULT_LIMIT


def is_column_name(name: str) -> bool:
    """Column names are ASCII letters and underscores only."""
    return bool(name) and all(c in COLUMN_CHARS for c in name)


def merge(values: Iterable[str]) -> List[str]:
    """Trim values, drop empty ones and remove duplicates, keeping first-seen order."""
    trimmed = (value.strip() for value in values)
    return [value for value in dict.fromkeys(trimmed) if value]


def filters_from(params: Mapping[str, Sequence[str]]) -> List[Filter]:
    """
    Build filters from raw query keys already restricted to the q: prefix.

    Keys that normalise to the same (field, operator) pair are merged.
    Filters left without any non-empty value are dropped.
    """
    grouped: Dict[Tuple[str, Operator], List[str]] = {}
    for key, values in params.items():
        parts = [part.strip() for part in key.split(":", 2)]
        if len(parts) != 3 or not all(parts):
            raise InvalidFilterError(f"invalid filter '{key}'")
        _, field, token = parts
        if not is_column_name(field):
            raise InvalidColumnError(f"invalid column name '{field}'")
        operator = Operator.parse(token)
        grouped.setdefault((field, operator), []).extend(values)

    filters = []
    for (field, operator), values in grouped.items():
        merged = merge(values)
        if merged:
            filters.append(Filter(field=field, operator=operator, values=frozenset(merged)))
    return filters


def _parse_int(params: Mapping[str, List[str]], name: str, default: int) -> int:
    values = params.get(name)
    if not values or not values[0].strip():
        return default
    try:
        return int(values[0].strip())
    except ValueError:
        raise InvalidPaginationError(f"{name} must be an integer") from None


def parse_list_query(items: Iterable[Tuple[str, str]]) -> ListQuery:
    """
    Parse the (key, value) pairs of a list request.

    Accepts request.query_params.multi_items() or urllib's parse_qsl() output.
    """
    params: Dict[str, List[str]] = {}
    for key, value in items:
        params.setdefault(key, []).append(value)

    asc = params.get("asc", [""])[0]
    ascending = asc.strip().lower() in TRUTHY

    offset = _parse_int(params, "offset", 0)
    if offset < 0:
        offset = 0
    limit = _parse_int(params, "limit", DEFAULT_LIMIT)
    if limit <= 0 or limit > MAX_LIMIT:
        limit = MAX_LIMIT

    sort = merge(params.get("sort", []))
    for column in sort:
        if not is_column_name(column):
            raise InvalidColumnError(f"invalid sort column '{column}'")

    filters = filters_from({k: v for k, v in params.items() if k.startswith(FILTER_PREFIX)})
    return ListQuery(filters=filters, sort=sort, ascending=ascending, offset=offset, limit=limit)
