"""
VideoAPI - Policy Base
"""
import logging
from typing import Generic, List, Sequence, TypeVar

from pydantic import BaseModel

from app.crud.errors import UnauthorizedError
from app.crud.filters import Filter
from app.schemas.user import Role
from app.services.auth import Claims
from app.store.sqlresource import Resource

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

WRITERS = (Role.ADMIN, Role.READ_WRITE)
PRODUCERS = (Role.ADMIN, Role.READ_WRITE, Role.SERVICE)


def only_fields(data: ModelT, *fields: str) -> ModelT:
    """Copy of data keeping only the given fields, if they were sent."""
    kept = {field: getattr(data, field) for field in fields if field in data.model_fields_set}
    return type(data).model_validate(kept)


def without_fields(data: ModelT, *fields: str) -> ModelT:
    """Copy of data dropping the given fields as if they were never sent."""
    kept = {field: getattr(data, field) for field in data.model_fields_set if field not in fields}
    return type(data).model_validate(kept)


def require_role(claims: Claims, action: str, *roles: Role, resource: str = "") -> None:
    """Raise UnauthorizedError unless the caller holds one of the roles."""
    if claims.role not in roles:
        logger.warning(f"Denied {action} on {resource or 'resource'} for '{claims.sub}' ({claims.role.value})")
        raise UnauthorizedError()


class Policy(Generic[ModelT]):
    """
    Forwards every operation to the store. Subclasses override the operations
    they restrict and call deny() or require() before forwarding.
    """

    def __init__(self, store: Resource[ModelT], claims: Claims):
        self.store = store
        self.claims = claims

    def deny(self, action: str) -> UnauthorizedError:
        logger.warning(
            f"Denied {action} on {type(self).__name__} for '{self.claims.sub}' ({self.claims.role.value})"
        )
        return UnauthorizedError()

    def require(self, action: str, *roles: Role) -> None:
        require_role(self.claims, action, *roles, resource=type(self).__name__)

    async def get_by_id(self, id: str) -> ModelT:
        return await self.store.get_by_id(id)

    async def get(self, filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> List[ModelT]:
        return await self.store.get(filters, sort, ascending, offset, limit)

    async def post(self, data: ModelT) -> str:
        return await self.store.post(data)

    async def put(self, id: str, data: ModelT) -> None:
        await self.store.put(id, data)

    async def delete(self, id: str) -> None:
        await self.store.delete(id)
