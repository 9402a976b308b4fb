"""
VideoAPI - Camera Policy
"""
from app.policy.base import WRITERS, Policy, only_fields
from app.schemas.camera import Camera
from app.schemas.user import Role


class CameraPolicy(Policy[Camera]):
    """Everybody reads; admins manage cameras, read-write users may only move local_path."""

    async def post(self, data: Camera) -> str:
        self.require("create", Role.ADMIN)
        return await self.store.post(data)

    async def put(self, id: str, data: Camera) -> None:
        self.require("update", *WRITERS)
        if self.claims.role != Role.ADMIN:
            if not data.local_path:
                raise self.deny("update without local_path")
            data = only_fields(data, "local_path")
        await self.store.put(id, data)

    async def delete(self, id: str) -> None:
        self.require("delete", Role.ADMIN)
        await self.store.delete(id)
