"""Vendor service: store profiles, win/loss stats, processed-order markers.

Rule: No SQLAlchemy / no FastAPI here. Pure Python business logic.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.core.pagination import PaginationParams
from app.domain.vendor import VendorProfile, VendorStats
from app.repositories.vendor import (
    STAT_FIELDS,
    VendorOrderRepository,
    VendorRepository,
    VendorStatsRepository,
)
from app.schemas.vendor import VendorCreate, VendorUpdate

logger = logging.getLogger(__name__)


class VendorService:
    def __init__(self, session: AsyncSession, client_id: str):
        self._repo = VendorRepository(session, client_id)
        self._stats = VendorStatsRepository(session, client_id)
        self._vendor_orders = VendorOrderRepository(session, client_id)
        self._client_id = client_id

    async def list_vendors(self, pagination: PaginationParams, status: str | None = None):
        filters = {"status": status} if status else None
        return await self._repo.list(
            **pagination.list_kwargs(sort="vendor_name", order="asc"), filters=filters,
        )

    async def get_vendor(self, vendor_id: str) -> VendorProfile:
        vendor = await self._repo.get_by_id(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor", vendor_id)
        return vendor

    async def create_vendor(self, data: VendorCreate) -> VendorProfile:
        vendor = await self._repo.create(**data.model_dump(exclude_none=True))
        logger.info("Created vendor %s (%s)", vendor.id, vendor.store_name)
        return vendor

    async def update_vendor(self, vendor_id: str, data: VendorUpdate) -> VendorProfile:
        _ = await self.get_vendor(vendor_id)  # raises 404 if missing
        updated = await self._repo.update(
            vendor_id, **data.model_dump(exclude_none=True, exclude_unset=True)
        )
        return updated  # type: ignore[return-value]

    async def delete_vendor(self, vendor_id: str) -> None:
        deleted = await self._repo.soft_delete(vendor_id)
        if not deleted:
            raise NotFoundError("Vendor", vendor_id)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    async def get_stats(self, vendor_id: str) -> VendorStats:
        """Current counters; an unsaved zero row when the vendor has none yet."""
        await self.get_vendor(vendor_id)
        stats = await self._stats.get_for_vendor(vendor_id)
        if stats is None:
            return VendorStats(
                client_id=self._client_id, vendor_id=vendor_id, orders_won=0, orders_lost=0,
            )
        return stats

    async def increment_stat(self, vendor_id: str, field: str) -> VendorStats:
        if field not in STAT_FIELDS:
            raise ValidationError(
                f"Unknown stat '{field}'. Expected one of: {', '.join(STAT_FIELDS)}"
            )
        await self.get_vendor(vendor_id)
        stats = await self._stats.increment(vendor_id, field)
        logger.info("Vendor %s %s -> %d", vendor_id, field, getattr(stats, field))
        return stats

    # ------------------------------------------------------------------
    # Vendor orders
    # ------------------------------------------------------------------

    async def processed_order_ids(self, vendor_id: str) -> list[str]:
        await self.get_vendor(vendor_id)
        return await self._vendor_orders.processed_order_ids(vendor_id)

    async def count_vendor_orders(self, vendor_id: str) -> int:
        await self.get_vendor(vendor_id)
        return await self._vendor_orders.count_for_vendor(vendor_id)
