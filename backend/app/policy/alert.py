"""
VideoAPI - Alert Policy
"""
from app.policy.base import PRODUCERS, Policy, only_fields
from app.schemas.alert import Alert
from app.schemas.user import Role


class AlertPolicy(Policy[Alert]):
    """
    Everybody reads. Admins, read-write users and services raise alerts;
    read-write users may only acknowledge or resolve them. Admins delete.
    """

    async def post(self, data: Alert) -> str:
        self.require("create", *PRODUCERS)
        return await self.store.post(data)

    async def put(self, id: str, data: Alert) -> None:
        self.require("update", *PRODUCERS)
        if self.claims.role == Role.READ_WRITE:
            data = only_fields(data, "acknowledged_at", "resolved_at")
        await self.store.put(id, data)

    async def delete(self, id: str) -> None:
        self.require("delete", Role.ADMIN)
        await self.store.delete(id)
