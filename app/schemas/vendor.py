"""Vendor Pydantic schemas (request DTOs and response models)."""


from datetime import datetime
from typing import Literal, Optional

from app.schemas.common import CamelModel

class VendorCreate(CamelModel):
    store_name: str
    vendor_name: str | None = None
    store_address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    notes: str | None = None

class VendorUpdate(CamelModel):
    store_name: str | None = None
    vendor_name: str | None = None
    store_address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    status: str | None = None
    notes: str | None = None

class VendorStatsOut(CamelModel):
    orders_won: int = 0
    orders_lost: int = 0

class VendorOut(CamelModel):
    id: str
    client_id: str
    store_name: str
    vendor_name: str | None = None
    store_address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    status: str
    notes: str | None = None
    stats: Optional[VendorStatsOut] = None
    created_at: datetime
    updated_at: datetime

class StatIncrement(CamelModel):
    field: Literal["orders_won", "orders_lost"]

class VendorOrdersOut(CamelModel):
    vendor_id: str
    processed_order_ids: list[str]
    order_count: int
