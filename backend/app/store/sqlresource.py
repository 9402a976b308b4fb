"""
VideoAPI - Generic SQL Resource

One engine serves every table: the record class, the table name and the
filterable columns are all it needs. Filter and sort columns are checked
against the declared columns before any SQL is built, so only trusted
identifiers ever reach the statement text; literals are always bound.
"""
import logging
from typing import Any, Generic, List, Mapping, Optional, Protocol, Sequence, Type, TypeVar

from app.crud.errors import InvalidColumnError
from app.crud.filters import Filter, is_column_name
from app.store.errors import (
    CommitError,
    MissingIdError,
    NoRowsError,
    QueryError,
    ResourceNotFoundError,
    UnknownColumnError,
)
from app.store.querier import Executor, Limiter, Querier, Transaction
from app.store.types import NULL_LITERAL, FilterSet, null_condition

logger = logging.getLogger(__name__)

T = TypeVar("T")
RecordT = TypeVar("RecordT", bound="Record")


class Record(Protocol):
    """What the engine needs from a record to write it."""

    def get_id(self) -> str:
        ...

    def prepare_create(self) -> List[str]:
        ...

    def prepare_update(self, id: str) -> List[str]:
        ...

    def bind_params(self, columns: Sequence[str]) -> Mapping[str, Any]:
        ...


class Resource(Protocol[T]):
    """Typed CRUD contract shared by the engine and the access policies."""

    async def get_by_id(self, id: str) -> T:
        ...

    async def get(self, filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> List[T]:
        ...

    async def post(self, data: T) -> str:
        ...

    async def put(self, id: str, data: T) -> None:
        ...

    async def delete(self, id: str) -> None:
        ...


def _check_columns(columns: Sequence[str]) -> None:
    for column in columns:
        if not is_column_name(column):
            raise InvalidColumnError(f"invalid column name '{column}'")


class SQLResource(Generic[RecordT]):
    """CRUD over a single table."""

    def __init__(
        self,
        model: Type[RecordT],
        querier: Querier,
        executor: Executor,
        table_name: str,
        columns: FilterSet,
        limiter: Limiter,
    ):
        self.model = model
        self.querier = querier
        self.executor = executor
        self.table_name = table_name
        self.columns = dict(columns)
        self.limiter = limiter

    # ============================================================
    # Reads
    # ============================================================

    async def get_by_id(self, id: str) -> RecordT:
        query = f"SELECT * FROM {self.table_name} WHERE id = ? {self.limiter(0, 1)}"
        try:
            return await self.querier.get(self.model, query, id)
        except NoRowsError as e:
            raise ResourceNotFoundError("failed to get resource", query, [id], e) from e
        except Exception as e:
            raise QueryError("failed to get resource", query, [id], e) from e

    def _where(self, filters: Sequence[Filter], params: List[Any]) -> Optional[str]:
        groups = []
        for f in filters:
            dbtype = self.columns.get(f.field)
            if dbtype is None:
                raise UnknownColumnError(f"column '{f.field}' does not exist")
            terms = []
            for value in sorted(f.values):
                if value == NULL_LITERAL:
                    terms.append(null_condition(f.field, f.operator))
                    continue
                condition, bound = dbtype.where(f.field, f.operator, value)
                terms.append(condition)
                params.append(bound)
            if terms:
                groups.append(" OR ".join(terms))
        if not groups:
            return None
        return "WHERE (" + ") AND (".join(groups) + ")"

    def _order_by(self, sort: Sequence[str], ascending: bool) -> str:
        _check_columns(sort)
        for column in sort:
            if column != "id" and column not in self.columns:
                raise UnknownColumnError(f"cannot sort by unknown column '{column}'")
        columns = ", ".join(sort) if sort else "id"
        return f"ORDER BY {columns} {'ASC' if ascending else 'DESC'}"

    async def get(self, filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> List[RecordT]:
        params: List[Any] = []
        parts = [f"SELECT * FROM {self.table_name}"]
        where = self._where(filters, params)
        if where:
            parts.append(where)
        parts.append(self._order_by(sort, ascending))
        parts.append(self.limiter(offset, limit))
        query = " ".join(parts)
        try:
            return await self.querier.select(self.model, query, *params)
        except Exception as e:
            raise QueryError("failed to filter resource", query, params, e) from e

    # ============================================================
    # Writes
    # ============================================================

    async def _rollback(self, tx: Transaction, query: str) -> None:
        try:
            await tx.rollback()
        except Exception as e:
            logger.error(f"Rollback on {self.table_name} failed: {e}\n\tquery: {query}")

    async def _write(self, message: str, query: str, mapping: Mapping[str, Any]) -> int:
        """
        Run one statement in its own transaction and return the affected rows.

        The transaction is rolled back on every exit that does not reach the
        commit, cancellation included. A failing rollback is logged and the
        original error is raised.
        """
        try:
            tx = await self.executor.begin()
        except Exception as e:
            raise QueryError("failed to begin transaction", query, mapping, e) from e

        # set once commit starts; commit releases the transaction itself
        committing = False
        try:
            try:
                statement, args = await tx.prepare_named(query, mapping)
            except Exception as e:
                raise QueryError(message, query, mapping, e) from e

            try:
                affected = await statement.execute(*args)
            except Exception as e:
                error = QueryError(message, statement.query_string(), args, e)
                logger.error(f"Write on {self.table_name} failed: {error}")
                raise error from e
            finally:
                await statement.close()

            committing = True
            try:
                await tx.commit()
            except Exception as e:
                error = CommitError("failed to commit transaction", statement.query_string(), args, e)
                logger.error(f"Commit on {self.table_name} failed, outcome unknown: {error}")
                raise error from e
        finally:
            if not committing:
                await self._rollback(tx, query)
        return affected

    async def post(self, data: RecordT) -> str:
        columns = data.prepare_create()
        _check_columns(columns)
        names = ", ".join(columns)
        placeholders = ", ".join(f":{column}" for column in columns)
        query = f"INSERT INTO {self.table_name} ({names}) VALUES ({placeholders})"
        affected = await self._write("failed to create resource", query, data.bind_params(columns))
        if affected != 1:
            raise QueryError(f"expected 1 row inserted, got {affected}", query, data.get_id())
        logger.info(f"Created {self.table_name} '{data.get_id()}'")
        return data.get_id()

    async def put(self, id: str, data: RecordT) -> None:
        if not id:
            raise MissingIdError()
        columns = data.prepare_update(id)
        _check_columns(columns)
        assignments = ", ".join(f"{column} = :{column}" for column in columns)
        query = f"UPDATE {self.table_name} SET {assignments} WHERE id = :id"
        affected = await self._write("failed to update resource", query, data.bind_params(columns))
        if affected == 0:
            raise ResourceNotFoundError("resource not found", query, id)

    async def delete(self, id: str) -> None:
        if not id:
            raise MissingIdError()
        query = f"DELETE FROM {self.table_name} WHERE id = :id"
        affected = await self._write("failed to delete resource", query, {"id": id})
        if affected:
            logger.info(f"Deleted {self.table_name} '{id}'")
