"""
VideoAPI - Media Policy
Shared by videos and pictures. media_url is only ever set by the upload pipeline.
"""
from app.policy.base import PRODUCERS, WRITERS, Policy, without_fields
from app.schemas.media import Media


class MediaPolicy(Policy[Media]):
    async def post(self, data: Media) -> str:
        self.require("create", *PRODUCERS)
        return await self.store.post(without_fields(data, "media_url"))

    async def put(self, id: str, data: Media) -> None:
        self.require("update", *PRODUCERS)
        await self.store.put(id, without_fields(data, "media_url"))

    async def delete(self, id: str) -> None:
        self.require("delete", *WRITERS)
        await self.store.delete(id)
