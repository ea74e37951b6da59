"""Vendor quotation schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import Field

from app.schemas.common import CamelModel


class ComponentQuoteCreate(CamelModel):
    order_item_id: str
    quoted_price: Decimal
    component_name: str | None = None
    quantity: int = 1


class ComponentQuoteOut(CamelModel):
    id: str
    vendor_id: str
    order_id: str
    order_item_id: str
    component_name: str
    quoted_price: Decimal
    quantity: int
    status: str | None = None
    updated_at: datetime


class ComponentQuotationOut(CamelModel):
    """An order line with the vendor's current quote merged in."""

    id: str
    order_item_id: str
    component_name: str
    component_id: str | None = None
    component_category: str | None = None
    component_details: dict[str, Any] = Field(default_factory=dict)
    quantity: int
    unit_price: Decimal
    quoted_price: Decimal
    status: str
    specs: str | None = None


class QuotationDecision(CamelModel):
    status: str


class QuotationOut(CamelModel):
    id: str
    vendor_id: str
    order_id: str
    price: Decimal
    status: str | None = None
    store_name: str | None = None
    tracking_id: str | None = None
    created_at: datetime
    updated_at: datetime


class VendorTotalsOut(CamelModel):
    vendor_id: str
    store_name: str | None = None
    quotation_count: int
    accepted_value: Decimal
