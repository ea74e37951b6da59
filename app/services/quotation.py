"""Quotation service: per-component vendor quotes and the admin decision on them."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.core.pagination import PaginationParams
from app.domain.quotation import VendorComponentQuotation, VendorQuotation
from app.repositories.order import OrderedComponentRepository, OrderItemRepository
from app.repositories.quotation import ComponentQuoteRepository, VendorQuotationRepository
from app.repositories.vendor import (
    VendorOrderRepository,
    VendorRepository,
    VendorStatsRepository,
)
from app.services.notifications import EmailService
from app.services.order import OrderService
from app.services.tracking import OrderStatus

logger = logging.getLogger(__name__)

QUOTATION_STATUSES = ("pending", "accepted", "rejected")
ACCEPTED_MESSAGE = "Vendor quotation has been accepted!"

# Checked in order; first keyword hit wins
_CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("processor", ("processor", "cpu", "ryzen", "intel")),
    ("graphics", ("graphics", "gpu", "rtx", "gtx")),
    ("memory", ("memory", "ram", "ddr")),
    ("storage", ("storage", "ssd", "hdd", "nvme")),
    ("cooling", ("cooling", "cooler", "fan")),
    ("power", ("power", "psu", "supply")),
    ("motherboard", ("motherboard", "mobo")),
    ("pcCase", ("case",)),
)


def infer_component_category(name: str) -> str:
    lowered = name.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return category
    return "other"


def component_display_name(
    name: str, category: str | None, details: Mapping[str, Any] | None,
) -> str:
    """Best human label for an ordered component.

    Prefers a ``brand model`` string (only when both are known) with
    category-specific specs appended; falls back to the name captured at
    checkout, then the stored name.
    """
    if not isinstance(details, Mapping):
        return name

    display = details.get("original_name") or name
    brand, model = details.get("brand"), details.get("model")
    if not (brand and model):
        return display

    full = f"{brand} {model}"
    kind = (category or details.get("category") or "").lower()
    if "processor" in kind or "cpu" in kind:
        if details.get("cores"):
            full += f" ({details['cores']} cores"
            if details.get("clock_speed"):
                full += f", {details['clock_speed']}GHz"
            full += ")"
    elif "graphics" in kind or "gpu" in kind:
        vram = details.get("vram") or details.get("memory")
        if vram:
            full += f" ({vram}GB VRAM)"
    elif "memory" in kind or "ram" in kind:
        if details.get("capacity") and details.get("speed"):
            full += f" {details['capacity']}GB {details['speed']}MHz"
    return full


class QuotationService:
    def __init__(
        self, session: AsyncSession, client_id: str, mailer: EmailService | None = None,
    ):
        self._quotes = ComponentQuoteRepository(session, client_id)
        self._quotations = VendorQuotationRepository(session, client_id)
        self._vendors = VendorRepository(session, client_id)
        self._stats = VendorStatsRepository(session, client_id)
        self._vendor_orders = VendorOrderRepository(session, client_id)
        self._components = OrderedComponentRepository(session, client_id)
        self._items = OrderItemRepository(session, client_id)
        self._orders = OrderService(session, client_id)
        self._mailer = mailer

    async def _get_vendor(self, vendor_id: str):
        vendor = await self._vendors.get_by_id(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor", vendor_id)
        return vendor

    async def _resolve_component_name(
        self, order_id: str, order_item_id: str, fallback: str | None,
    ) -> str:
        component = await self._components.first_by(id=order_item_id, order_id=order_id)
        if component:
            return component.component_name
        item = await self._items.first_by(id=order_item_id, order_id=order_id)
        if item:
            return item.component_name
        return fallback or "Component"

    async def submit_component_quote(
        self,
        vendor_id: str,
        order_id: str,
        order_item_id: str,
        quoted_price: Decimal | int | float,
        component_name: str | None = None,
        quantity: int = 1,
    ) -> VendorComponentQuotation:
        """Record (or revise) a vendor's unit price for one order line; status resets to pending."""
        if not vendor_id or not order_id or not order_item_id:
            raise ValidationError("vendor_id, order_id and order_item_id are required")
        price = Decimal(str(quoted_price))
        if price < 0:
            raise ValidationError("Quoted price cannot be negative")
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        await self._get_vendor(vendor_id)
        await self._orders.get_order(order_id)
        name = await self._resolve_component_name(order_id, order_item_id, component_name)

        existing = await self._quotes.for_item(vendor_id, order_item_id)
        if existing:
            quote = await self._quotes.update(
                existing.id,
                order_id=order_id,
                component_name=name,
                quoted_price=price,
                quantity=quantity,
                status="pending",
            )
        else:
            quote = await self._quotes.create(
                vendor_id=vendor_id,
                order_id=order_id,
                order_item_id=order_item_id,
                component_name=name,
                quoted_price=price,
                quantity=quantity,
                status="pending",
            )
        logger.info("Vendor %s quoted %s for item %s of order %s", vendor_id, price, order_item_id, order_id)
        return quote  # type: ignore[return-value]

    async def get_component_quotations(self, vendor_id: str, order_id: str) -> list[dict[str, Any]]:
        """Order lines with this vendor's quotes merged in (unquoted lines default to unit price)."""
        await self._get_vendor(vendor_id)
        await self._orders.get_order(order_id)
        quotes = {q.order_item_id: q for q in await self._quotes.for_vendor_order(vendor_id, order_id)}

        rows: list[dict[str, Any]] = []
        components = await self._components.for_order(order_id)
        if components:
            for c in components:
                details = dict(c.component_details or {})
                quote = quotes.get(c.id)
                rows.append({
                    "id": c.id,
                    "order_item_id": c.id,
                    "component_name": component_display_name(c.component_name, c.component_category, details),
                    "component_id": c.component_id,
                    "component_category": c.component_category,
                    "component_details": details,
                    "quantity": c.quantity or 1,
                    "unit_price": c.unit_price or Decimal(0),
                    "quoted_price": quote.quoted_price if quote else (c.unit_price or Decimal(0)),
                    "status": (quote.status if quote else None) or "pending",
                    "specs": details.get("description"),
                })
            return rows

        for item in await self._items.for_order(order_id):
            category = infer_component_category(item.component_name)
            quote = quotes.get(item.id)
            rows.append({
                "id": item.id,
                "order_item_id": item.id,
                "component_name": item.component_name,
                "component_id": item.component_id,
                "component_category": category,
                "component_details": {
                    "name": item.component_name,
                    "category": category,
                    "description": item.component_name,
                },
                "quantity": item.quantity or 1,
                "unit_price": item.price_at_time or Decimal(0),
                "quoted_price": quote.quoted_price if quote else (item.price_at_time or Decimal(0)),
                "status": (quote.status if quote else None) or "pending",
                "specs": item.component_name,
            })
        if not rows:
            logger.info("Order %s has no lines to quote", order_id)
        return rows

    async def decide_quotation(self, vendor_id: str, order_id: str, status: str) -> VendorQuotation:
        """Apply an admin decision to all of a vendor's component quotes for an order.

        Vendor win/loss counters move only when the decision actually changes.
        """
        if status not in QUOTATION_STATUSES:
            raise ValidationError(
                f"Invalid quotation status '{status}'. Expected one of: {', '.join(QUOTATION_STATUSES)}"
            )
        vendor = await self._get_vendor(vendor_id)
        order = await self._orders.get_order(order_id)

        quotes = await self._quotes.for_vendor_order(vendor_id, order_id)
        await self._quotes.set_status(vendor_id, order_id, status)
        total = sum((q.quoted_price * q.quantity for q in quotes), Decimal(0))

        quotation = await self._quotations.for_vendor_order(vendor_id, order_id)
        previous = quotation.status if quotation else None
        if quotation:
            quotation = await self._quotations.update(quotation.id, price=total, status=status)
        else:
            quotation = await self._quotations.create(
                vendor_id=vendor_id, order_id=order_id, price=total, status=status,
            )

        await self._vendor_orders.upsert(vendor_id, order_id, status)

        if status != previous:
            if status == "accepted":
                await self._stats.increment(vendor_id, "orders_won")
                await self._orders.update_order_status(
                    order_id, OrderStatus.PROCESSING.value, ACCEPTED_MESSAGE,
                )
            elif status == "rejected":
                await self._stats.increment(vendor_id, "orders_lost")

        logger.info("Quotation of vendor %s for order %s -> %s (%s)", vendor_id, order_id, status, total)

        if self._mailer and vendor.contact_email and status != "pending":
            await self._mailer.send_quotation_decision(
                vendor.contact_email, vendor.store_name, order.tracking_id, status, total,
            )
        return quotation  # type: ignore[return-value]

    async def list_quotations(
        self,
        pagination: PaginationParams,
        status: str | None = None,
        vendor_id: str | None = None,
        order_id: str | None = None,
    ):
        filters = {"status": status, "vendor_id": vendor_id, "order_id": order_id}
        return await self._quotations.list(**pagination.list_kwargs(), filters=filters)

    async def list_component_quotes(self, vendor_id: str, order_id: str) -> list[VendorComponentQuotation]:
        return await self._quotes.for_vendor_order(vendor_id, order_id)

    async def vendor_quotation_totals(self) -> list[dict[str, Any]]:
        totals = []
        for vendor_id, count, accepted_value in await self._quotations.totals_by_vendor():
            vendor = await self._vendors.get_by_id(vendor_id)
            totals.append({
                "vendor_id": vendor_id,
                "store_name": vendor.store_name if vendor else None,
                "quotation_count": count,
                "accepted_value": accepted_value,
            })
        return totals
