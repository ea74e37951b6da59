"""Quotation repositories: order-level vendor quotations and per-component quotes."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import case, func, select, update

from app.domain.quotation import VendorComponentQuotation, VendorQuotation
from app.repositories.base import BaseRepository


class VendorQuotationRepository(BaseRepository[VendorQuotation]):
    model = VendorQuotation

    async def for_vendor_order(self, vendor_id: str, order_id: str) -> VendorQuotation | None:
        return await self.first_by(vendor_id=vendor_id, order_id=order_id)

    async def totals_by_vendor(self) -> list[tuple[str, int, Decimal]]:
        """Return ``(vendor_id, quotation_count, accepted_value)`` per vendor."""
        accepted = func.sum(
            case((VendorQuotation.status == "accepted", VendorQuotation.price), else_=0)
        )
        q = (
            select(VendorQuotation.vendor_id, func.count(VendorQuotation.id), accepted)
            .where(VendorQuotation.client_id == self._client_id)
            .where(VendorQuotation.deleted_at.is_(None))
            .group_by(VendorQuotation.vendor_id)
        )
        rows = (await self._session.execute(q)).all()
        return [(vendor_id, count, Decimal(str(total or 0))) for vendor_id, count, total in rows]


class ComponentQuoteRepository(BaseRepository[VendorComponentQuotation]):
    model = VendorComponentQuotation

    async def for_vendor_order(self, vendor_id: str, order_id: str) -> list[VendorComponentQuotation]:
        return await self.all_by(vendor_id=vendor_id, order_id=order_id)

    async def for_item(self, vendor_id: str, order_item_id: str) -> VendorComponentQuotation | None:
        return await self.first_by(vendor_id=vendor_id, order_item_id=order_item_id)

    async def set_status(self, vendor_id: str, order_id: str, status: str) -> int:
        result = await self._session.execute(
            update(VendorComponentQuotation)
            .where(VendorComponentQuotation.client_id == self._client_id)
            .where(VendorComponentQuotation.vendor_id == vendor_id)
            .where(VendorComponentQuotation.order_id == order_id)
            .values(status=status)
            .execution_options(synchronize_session="fetch")
        )
        await self._session.flush()
        return result.rowcount
