"""
VideoAPI - Resource Adaptor
Exposes a typed resource (the SQL engine or a policy over it) through the JSON contract.
"""
from typing import Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.crud.cursor import next_page
from app.crud.errors import EmptyBodyError, InvalidJsonError
from app.crud.filters import Filter
from app.store.sqlresource import Resource

ModelT = TypeVar("ModelT", bound=BaseModel)


class Page(BaseModel, Generic[ModelT]):
    """List envelope; next holds the query string of the following page, if any."""
    data: List[ModelT]
    next: str = ""


class Created(BaseModel):
    id: str


class Adaptor(Generic[ModelT]):
    def __init__(self, model: Type[ModelT], resource: Resource[ModelT]):
        self.model = model
        self.resource = resource

    def decode(self, body: bytes) -> ModelT:
        if not body:
            raise EmptyBodyError()
        try:
            return self.model.model_validate_json(body)
        except ValidationError as e:
            detail = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc']) or 'body'}: {error['msg']}"
                for error in e.errors()
            )
            raise InvalidJsonError(f"invalid json format: {detail}") from e

    async def get_by_id(self, id: str) -> bytes:
        record = await self.resource.get_by_id(id)
        return record.model_dump_json().encode()

    async def get(self, filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> bytes:
        records = await self.resource.get(filters, sort, ascending, offset, limit)
        page = Page[self.model](data=records)
        # a short page is the last one
        if len(records) >= limit:
            page.next = next_page(filters, sort, ascending, offset, limit)
        return page.model_dump_json().encode()

    async def post(self, body: bytes) -> bytes:
        record = self.decode(body)
        id = await self.resource.post(record)
        return Created(id=id).model_dump_json().encode()

    async def put(self, id: str, body: bytes) -> Optional[bytes]:
        await self.resource.put(id, self.decode(body))
        return None

    async def delete(self, id: str) -> Optional[bytes]:
        await self.resource.delete(id)
        return None
