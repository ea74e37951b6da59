"""Vendor repositories: store profiles, win/loss stats, processed-order markers."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select

from app.domain.vendor import VendorOrder, VendorProfile, VendorStats
from app.repositories.base import BaseRepository

STAT_FIELDS = ("orders_won", "orders_lost")


class VendorRepository(BaseRepository[VendorProfile]):
    model = VendorProfile


class VendorStatsRepository(BaseRepository[VendorStats]):
    model = VendorStats

    async def get_for_vendor(self, vendor_id: str) -> VendorStats | None:
        return await self.first_by(vendor_id=vendor_id)

    async def increment(self, vendor_id: str, field: str, by: int = 1) -> VendorStats:
        """Add *by* to ``orders_won`` or ``orders_lost``, creating the row on first use."""
        if field not in STAT_FIELDS:
            raise ValueError(f"Unknown vendor stat field: {field}")

        stats = await self.get_for_vendor(vendor_id)
        if stats is None:
            stats = VendorStats(
                client_id=self._client_id, vendor_id=vendor_id, orders_won=0, orders_lost=0,
            )
            self._session.add(stats)
        setattr(stats, field, getattr(stats, field) + by)
        stats.updated_at = datetime.now(timezone.utc)
        await self._session.flush()
        return stats


class VendorOrderRepository(BaseRepository[VendorOrder]):
    model = VendorOrder

    async def upsert(self, vendor_id: str, order_id: str, status: str) -> VendorOrder:
        existing = await self.first_by(vendor_id=vendor_id, order_id=order_id)
        if existing is None:
            return await self.create(vendor_id=vendor_id, order_id=order_id, status=status)
        existing.status = status
        await self._session.flush()
        return existing

    async def processed_order_ids(self, vendor_id: str) -> list[str]:
        q = (
            select(VendorOrder.order_id)
            .where(VendorOrder.client_id == self._client_id)
            .where(VendorOrder.vendor_id == vendor_id)
            .where(VendorOrder.deleted_at.is_(None))
            .where(VendorOrder.status.in_(("accepted", "rejected")))
            .order_by(VendorOrder.updated_at.desc())
        )
        return list((await self._session.execute(q)).scalars().all())

    async def count_for_vendor(self, vendor_id: str) -> int:
        q = (
            select(func.count())
            .select_from(VendorOrder)
            .where(VendorOrder.client_id == self._client_id)
            .where(VendorOrder.vendor_id == vendor_id)
            .where(VendorOrder.deleted_at.is_(None))
        )
        return (await self._session.execute(q)).scalar_one()
