"""
VideoAPI - CRUD Layer
Query-string grammar, pagination cursors and the HTTP surface shared by every resource
"""
from app.crud.errors import CrudError
from app.crud.filters import Filter, ListQuery, filters_from, is_column_name, merge, parse_list_query
from app.crud.operator import Operator

__all__ = [
    "CrudError",
    "Filter",
    "ListQuery",
    "Operator",
    "filters_from",
    "is_column_name",
    "merge",
    "parse_list_query",
]
