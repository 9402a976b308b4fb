"""
VideoAPI - SQLAlchemy Driver
Implements the querier/executor contracts over an AsyncEngine with textual SQL.
"""
import logging
import re
from datetime import datetime
from itertools import count
from typing import Any, List, Mapping, Sequence, Tuple, Type

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.sql.elements import TextClause

from app.store.errors import NoRowsError
from app.store.querier import Limiter, ModelT

logger = logging.getLogger(__name__)

_NAMED = re.compile(r"(?<![:\w]):([A-Za-z_]\w*)")
_POSITIONAL = re.compile(r"\?")


def bind_named(query: str, mapping: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    """Turn ':name' placeholders into '?' and collect their values in order."""
    args: List[Any] = []

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in mapping:
            raise KeyError(f"no value for named parameter :{name}")
        args.append(mapping[name])
        return "?"

    return _NAMED.sub(replace, query), args


def rewrite_placeholders(query: str) -> str:
    """Number '?' placeholders as :p1, :p2, ... for SQLAlchemy text()."""
    counter = count(1)
    return _POSITIONAL.sub(lambda _: f":p{next(counter)}", query)


def _bind(clause: TextClause, args: Sequence[Any]) -> TextClause:
    params = []
    for index, value in enumerate(args, start=1):
        type_ = DateTime(timezone=True) if isinstance(value, datetime) else None
        params.append(bindparam(f"p{index}", value, type_=type_))
    return clause.bindparams(*params)


def limit_offset_limiter(offset: int, limit: int) -> str:
    return f"LIMIT {int(limit)} OFFSET {int(offset)}"


def oracle_limiter(offset: int, limit: int) -> str:
    return f"OFFSET {int(offset)} ROWS FETCH NEXT {int(limit)} ROWS ONLY"


def limiter_for(database_url: str) -> Limiter:
    if database_url.startswith("oracle"):
        return oracle_limiter
    return limit_offset_limiter


def _record(model: Type[ModelT], row: Mapping[str, Any]) -> ModelT:
    # some backends report upper case column names
    return model.model_validate({key.lower(): value for key, value in row.items()})


class SQLAlchemyQuerier:
    """Read-only queries, each on its own pooled connection."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def _rows(self, query: str, args: Sequence[Any]):
        clause = _bind(text(rewrite_placeholders(query)), args)
        async with self.engine.connect() as conn:
            result = await conn.execute(clause)
            return result.mappings().all()

    async def get(self, model: Type[ModelT], query: str, *args: Any) -> ModelT:
        rows = await self._rows(query, args)
        if not rows:
            raise NoRowsError("no rows in result set")
        return _record(model, rows[0])

    async def select(self, model: Type[ModelT], query: str, *args: Any) -> List[ModelT]:
        rows = await self._rows(query, args)
        return [_record(model, row) for row in rows]


class SQLAlchemyStatement:
    def __init__(self, conn: AsyncConnection, query: str):
        self._conn = conn
        self._query = query
        self._clause = text(query)
        self._closed = False

    def query_string(self) -> str:
        return self._query

    async def execute(self, *args: Any) -> int:
        if self._closed:
            raise RuntimeError("statement is closed")
        result = await self._conn.execute(_bind(self._clause, args))
        return result.rowcount

    async def close(self) -> None:
        self._closed = True


class SQLAlchemyTransaction:
    """A transaction holding its own connection until commit or rollback."""

    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def prepare_named(self, query: str, mapping: Mapping[str, Any]) -> Tuple[SQLAlchemyStatement, List[Any]]:
        positional, args = bind_named(query, mapping)
        return SQLAlchemyStatement(self._conn, rewrite_placeholders(positional)), args

    async def commit(self) -> None:
        try:
            await self._conn.commit()
        finally:
            await self._conn.close()

    async def rollback(self) -> None:
        try:
            await self._conn.rollback()
        finally:
            await self._conn.close()


class SQLAlchemyExecutor:
    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def begin(self) -> SQLAlchemyTransaction:
        conn = await self.engine.connect()
        try:
            await conn.begin()
        except Exception:
            await conn.close()
            raise
        return SQLAlchemyTransaction(conn)
