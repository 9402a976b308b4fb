"""
VideoAPI - Pagination Cursors
Builds the query string of the neighbouring page in the list grammar.
"""
from typing import List, Sequence, Tuple
from urllib.parse import urlencode

from app.crud.filters import FILTER_PREFIX, Filter


def _navigate(filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> str:
    query: List[Tuple[str, str]] = [("offset", str(offset)), ("limit", str(limit))]
    if ascending:
        query.append(("asc", "true"))
    query.extend(("sort", column) for column in sort)
    # canonical order so the same state always gives the same cursor
    for f in sorted(filters, key=lambda f: (f.field, f.operator.value)):
        key = f"{FILTER_PREFIX}{f.field}:{f.operator.value}"
        query.extend((key, value) for value in sorted(f.values))
    return urlencode(query, safe=":")


def next_page(filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> str:
    """Query string for the page after the given one."""
    return _navigate(filters, sort, ascending, offset + limit, limit)


def prev_page(filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> str:
    """Query string for the page before the given one, clamped at offset 0."""
    return _navigate(filters, sort, ascending, max(offset - limit, 0), limit)
