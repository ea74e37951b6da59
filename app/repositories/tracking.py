"""Tracking-file repository."""

from __future__ import annotations

from app.domain.tracking import TrackingFile
from app.repositories.base import BaseRepository


class TrackingFileRepository(BaseRepository[TrackingFile]):
    model = TrackingFile

    async def for_order(self, order_id: str) -> list[TrackingFile]:
        return await self.all_by(order_by="created_at", order="desc", order_id=order_id)

    async def latest_of_type(self, order_id: str, file_type: str) -> TrackingFile | None:
        return await self.first_by(order_by="created_at", order_id=order_id, file_type=file_type)
