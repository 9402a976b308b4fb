"""
VideoAPI - JSON Resource Contract
What the HTTP handler expects from any resource: raw JSON in, raw JSON out.
"""
from typing import Optional, Protocol, Sequence

from app.crud.filters import Filter


class Resource(Protocol):
    async def get_by_id(self, id: str) -> bytes:
        ...

    async def get(self, filters: Sequence[Filter], sort: Sequence[str], ascending: bool, offset: int, limit: int) -> bytes:
        ...

    async def post(self, body: bytes) -> bytes:
        ...

    async def put(self, id: str, body: bytes) -> Optional[bytes]:
        """Returns None when there is nothing to send back."""
        ...

    async def delete(self, id: str) -> Optional[bytes]:
        ...
