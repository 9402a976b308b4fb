"""
VideoAPI - User Policy

Admins manage every account. Everybody else can only read and update their
own account, without touching its role. Nobody changes their own role or
deletes themselves.
"""
from typing import List, Sequence

from app.crud.filters import Filter
from app.policy.base import Policy
from app.schemas.user import Role, User


class UserPolicy(Policy[User]):
    def _is_admin(self) -> bool:
        return self.claims.role == Role.ADMIN

    async def get_by_id(self, id: str) -> User:
        if not self._is_admin() and id != self.claims.sub:
            raise self.deny("read")
        return await self.store.get_by_id(id)

    async def get(self, filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> List[User]:
        self.require("list", Role.ADMIN)
        return await self.store.get(filters, sort, ascending, offset, limit)

    async def post(self, data: User) -> str:
        self.require("create", Role.ADMIN)
        return await self.store.post(data)

    async def put(self, id: str, data: User) -> None:
        changes_role = "role" in data.model_fields_set and data.role is not None
        if id == self.claims.sub and changes_role:
            raise self.deny("role change")
        if not self._is_admin() and (id != self.claims.sub or changes_role):
            raise self.deny("update")
        await self.store.put(id, data)

    async def delete(self, id: str) -> None:
        if id == self.claims.sub:
            raise self.deny("self delete")
        self.require("delete", Role.ADMIN)
        await self.store.delete(id)
