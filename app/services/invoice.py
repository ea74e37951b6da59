"""Invoice PDFs: rendering with PyMuPDF, storage in the invoices bucket, URL lookup.

Layout coordinates are in millimetres on an A4 page and converted to PDF
points when drawn.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.domain.mixins import utcnow
from app.domain.order import Order
from app.domain.tracking import TrackingFile
from app.repositories.tracking import TrackingFileRepository
from app.services.catalog import COMPONENT_LABELS, indian_grouping
from app.services.charges import OrderPricing
from app.services.order import EXTRA_STORAGE_CATEGORY, OrderLine, OrderService
from app.services.storage import LocalBucketStorage

logger = logging.getLogger(__name__)

_PT_PER_MM = 72 / 25.4
_PAGE_W, _PAGE_H = 210, 297
_PURPLE = (128 / 255, 0, 128 / 255)
_PINK = (1, 0, 1)
_WHITE = (1, 1, 1)
_BLACK = (0, 0, 0)
_HEAD_GREY = (230 / 255,) * 3
_GRID_GREY = (220 / 255,) * 3
_TOTAL_GREY = (240 / 255,) * 3

# (header, width mm)
_COLUMNS = (("Component", 40), ("Description", 85), ("Qty", 10), ("Price", 25))
_ROW_H = 7
_TABLE_X = 20

_ROW_LABELS = {**COMPONENT_LABELS, EXTRA_STORAGE_CATEGORY: "Storage (Additional)"}


def _pt(mm: float) -> float:
    return mm * _PT_PER_MM


def _rupees(amount: Decimal | int | float | None) -> str:
    """Whole rupees with Indian grouping, no symbol (the PDF base fonts lack ₹)."""
    value = int(round(Decimal(str(amount or 0))))
    sign = "-" if value < 0 else ""
    return sign + indian_grouping(str(abs(value)))


def _fit(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def generate_invoice_number(now: datetime | None = None) -> str:
    """``ASB-NNNN-YYYY`` with a random four-digit middle part."""
    now = now or utcnow()
    return f"ASB-{1000 + secrets.randbelow(9000)}-{now.year}"


def pricing_of(order: Order) -> OrderPricing:
    """Rebuild the pricing snapshot stored on an order row."""
    def whole(value) -> int:
        return int(value or 0)

    return OrderPricing(
        build_cost=whole(order.build_cost),
        build_charge=whole(order.build_charge),
        weight=float(order.weight_kg or 0),
        delivery_charge=whole(order.shipping_charge),
        gst=whole(order.gst_amount),
        total=whole(order.grand_total),
    )


def _text(page, x_mm: float, y_mm: float, text: str, *, size: float = 10,
          bold: bool = False, color=_BLACK) -> None:
    page.insert_text(
        (_pt(x_mm), _pt(y_mm)), text,
        fontsize=size, fontname="hebo" if bold else "helv", color=color,
    )


def _centered(page, x0_mm: float, y0_mm: float, x1_mm: float, y1_mm: float, text: str, *,
              size: float = 9, bold: bool = False, color=_BLACK) -> None:
    import fitz  # PyMuPDF

    page.insert_textbox(
        fitz.Rect(_pt(x0_mm), _pt(y0_mm) + 3, _pt(x1_mm), _pt(y1_mm) + 3), text,
        fontsize=size, fontname="hebo" if bold else "helv", color=color,
        align=fitz.TEXT_ALIGN_CENTER,
    )


def _fill(page, x0_mm: float, y0_mm: float, x1_mm: float, y1_mm: float, fill,
          border=None) -> None:
    import fitz  # PyMuPDF

    page.draw_rect(
        fitz.Rect(_pt(x0_mm), _pt(y0_mm), _pt(x1_mm), _pt(y1_mm)),
        color=border, fill=fill, width=0.3 if border else 0,
    )


def _table_rows(lines: Iterable[OrderLine], pricing: OrderPricing) -> list[tuple[str, ...]]:
    components, extras = [], []
    for line in lines:
        category = line.component_category or ""
        row = (
            _ROW_LABELS.get(category, category.title() or "Component"),
            _fit(line.component_name, 48),
            str(line.quantity),
            _rupees(line.total_price),
        )
        (extras if category == EXTRA_STORAGE_CATEGORY else components).append(row)
    return [
        *components,
        ("Build Charge", "Assembly Service", "1", _rupees(pricing.build_charge)),
        ("Delivery", "Standard Shipping", "1", _rupees(pricing.delivery_charge)),
        *extras,
    ]


def render_invoice(
    order: Order,
    lines: list[OrderLine],
    pricing: OrderPricing,
    *,
    invoice_number: str | None = None,
    issued_at: datetime | None = None,
) -> bytes:
    """Render the customer invoice for *order* and return the PDF bytes."""
    import fitz  # PyMuPDF

    issued_at = issued_at or utcnow()
    invoice_number = invoice_number or generate_invoice_number(issued_at)
    build_type = order.build_type or "Gaming"

    doc = fitz.open()
    try:
        doc.set_metadata({
            "title": "PC Build Invoice",
            "subject": "Custom PC Build Invoice",
            "author": "Assemblie",
            "keywords": "invoice, pc, gaming",
            "creator": "Assemblie Invoice Generator",
        })
        page = doc.new_page(width=_pt(_PAGE_W), height=_pt(_PAGE_H))

        # Header band
        _fill(page, 0, 0, _PAGE_W, 30, _PURPLE)
        _fill(page, 0, 30, _PAGE_W, 35, _PINK)
        _centered(page, 0, 10, _PAGE_W, 22, "ASSEMBLIE", size=26, bold=True, color=_WHITE)
        _centered(page, 0, 22, _PAGE_W, 29, "CUSTOM GAMING PC BUILDERS", size=12, color=_WHITE)

        _text(page, 20, 50, f"INVOICE #{invoice_number}", size=12, bold=True)
        _text(page, 20, 60, f"DATE: {issued_at.day}/{issued_at.month}/{issued_at.year}",
              size=12, bold=True)

        _fill(page, 20, 67, 190, 77, _PURPLE)
        _centered(page, 20, 68.5, 190, 77, f"{build_type.upper()} PC BUILD",
                  size=12, bold=True, color=_WHITE)

        # Customer block
        _text(page, 20, 95, "CUSTOMER DETAILS", size=12, bold=True)
        y = 105
        _text(page, 20, y, f"Name: {order.customer_name or 'Customer'}")
        y += 7
        if order.customer_email:
            _text(page, 20, y, f"Email: {order.customer_email}")
            y += 7
        address = ", ".join(p for p in (order.address, order.city, order.state, order.zipcode) if p)
        if address:
            _text(page, 20, y, f"Address: {_fit(address, 95)}")

        # Components table
        y = 130
        x = _TABLE_X
        for header, width in _COLUMNS:
            _fill(page, x, y, x + width, y + _ROW_H, _HEAD_GREY, border=_GRID_GREY)
            _centered(page, x, y + 1, x + width, y + _ROW_H, header, bold=True)
            x += width
        y += _ROW_H

        for row in _table_rows(lines, pricing):
            if y + _ROW_H > _PAGE_H - 20:
                page = doc.new_page(width=_pt(_PAGE_W), height=_pt(_PAGE_H))
                y = 20
            x = _TABLE_X
            for value, (_, width) in zip(row, _COLUMNS):
                _fill(page, x, y, x + width, y + _ROW_H, None, border=_GRID_GREY)
                _centered(page, x, y + 1, x + width, y + _ROW_H, value, size=8)
                x += width
            y += _ROW_H

        # Pricing summary
        summary = (
            ("Components Total:", _rupees(pricing.build_cost)),
            ("Build Charge:", _rupees(pricing.build_charge)),
            (
                f"Delivery ({pricing.weight:.1f} kg @ {settings.delivery_rate_per_kg}/kg):",
                _rupees(pricing.delivery_charge),
            ),
            (f"GST ({round(settings.gst_rate * 100)}%):", _rupees(pricing.gst)),
        )
        y += 10
        if y + len(summary) * 6 + 15 > _PAGE_H - 10:
            page = doc.new_page(width=_pt(_PAGE_W), height=_pt(_PAGE_H))
            y = 20
        for label, amount in summary:
            _centered(page, 30, y, 130, y + 6, label, size=10)
            _centered(page, 130, y, 180, y + 6, amount, size=10, bold=True)
            y += 6

        y += 5
        _fill(page, 60, y - 4, 150, y + 6, _TOTAL_GREY)
        _text(page, 85, y + 3, "TOTAL:", bold=True)
        _centered(page, 105, y - 1.5, 145, y + 5, _rupees(pricing.total), size=10, bold=True)

        pdf = doc.tobytes()
    finally:
        doc.close()

    logger.info("Rendered invoice %s for order %s (%d bytes)", invoice_number, order.id, len(pdf))
    return pdf


def invoice_key(order_id: str) -> str:
    return f"order_{order_id}/invoice_{order_id}.pdf"


class InvoiceService:
    def __init__(self, session: AsyncSession, client_id: str, storage: LocalBucketStorage):
        self._orders = OrderService(session, client_id)
        self._files = TrackingFileRepository(session, client_id)
        self._storage = storage

    async def store_invoice(self, order_id: str, pdf: bytes) -> TrackingFile:
        """Upload *pdf* for the order and record it as the order's only invoice row."""
        await self._orders.get_order(order_id)
        key = invoice_key(order_id)
        url = await self._storage.upload(key, pdf)

        for previous in await self._files.all_by(order_id=order_id, file_type="invoice"):
            await self._files.soft_delete(previous.id)

        record = await self._files.create(
            order_id=order_id,
            file_name=key.rsplit("/", 1)[-1],
            file_type="invoice",
            file_url=url,
        )
        logger.info("Recorded invoice for order %s at %s", order_id, url)
        return record

    async def generate_invoice(self, order_id: str) -> TrackingFile:
        order = await self._orders.get_order(order_id)
        lines = await self._orders.fetch_order_items(order_id)
        pdf = render_invoice(order, lines, pricing_of(order))
        return await self.store_invoice(order_id, pdf)

    def _find_key(self, order_id: str) -> str | None:
        """Find an invoice for the order directly in the bucket."""
        folder = f"order_{order_id}"
        pdfs = [name for name in self._storage.list(folder) if name.endswith(".pdf")]
        if pdfs:
            invoices = [name for name in pdfs if name.startswith("invoice_")]
            return f"{folder}/{(invoices or pdfs)[0]}"
        for key in (f"order_{order_id}.pdf", f"{order_id}.pdf"):
            if self._storage.exists(key):
                return key
        return None

    async def get_invoice_url(self, order_id: str) -> str | None:
        record = await self._files.latest_of_type(order_id, "invoice")
        if record and record.file_url:
            return record.file_url

        key = self._find_key(order_id)
        if key is None:
            logger.info("No invoice found for order %s", order_id)
            return None
        logger.debug("Invoice for order %s found in bucket: %s", order_id, key)
        return self._storage.public_url(key)

    async def list_files(self, order_id: str) -> list[TrackingFile]:
        await self._orders.get_order(order_id)
        return await self._files.for_order(order_id)

    async def download_invoice(self, order_id: str) -> tuple[str, Path]:
        await self._orders.get_order(order_id)
        key = self._find_key(order_id)
        if key is None:
            raise NotFoundError("Invoice", order_id)
        return key.rsplit("/", 1)[-1], self._storage.file_path(key)
