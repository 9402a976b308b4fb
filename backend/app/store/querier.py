"""
VideoAPI - Database Access Contracts

The storage engine only talks to these protocols. Queries use '?'
positional placeholders; writes are prepared from ':name' placeholders
bound against a mapping.
"""
from typing import Any, Callable, List, Mapping, Protocol, Tuple, Type, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

# (offset, limit) -> SQL clause appended to SELECT statements
Limiter = Callable[[int, int], str]


class Querier(Protocol):
    async def get(self, model: Type[ModelT], query: str, *args: Any) -> ModelT:
        """Single row as a record; raises NoRowsError when nothing matched."""
        ...

    async def select(self, model: Type[ModelT], query: str, *args: Any) -> List[ModelT]:
        ...


class Statement(Protocol):
    def query_string(self) -> str:
        ...

    async def execute(self, *args: Any) -> int:
        """Run the statement and return the number of affected rows."""
        ...

    async def close(self) -> None:
        ...


class Transaction(Protocol):
    async def prepare_named(self, query: str, mapping: Mapping[str, Any]) -> Tuple[Statement, List[Any]]:
        """Prepare a ':name' statement, returning it with its positional arguments."""
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...


class Executor(Protocol):
    async def begin(self) -> Transaction:
        ...
