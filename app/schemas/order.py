"""Order, order-line and tracking schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class OrderCreate(CamelModel):
    """Checkout payload: who is buying, where it ships, and the catalog ids chosen per type."""

    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=3)
    customer_phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    build_type: str | None = None
    components: dict[str, str]
    extra_storage: list[str] = Field(default_factory=list)


class OrderOut(CamelModel):
    id: str
    tracking_id: str
    customer_id: str | None = None
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    build_type: str | None = None
    build_cost: Decimal | None = None
    build_charge: Decimal | None = None
    shipping_charge: Decimal | None = None
    gst_amount: Decimal | None = None
    grand_total: Decimal | None = None
    weight_kg: Decimal | None = None
    status: str
    order_date: datetime
    estimated_delivery: datetime
    created_at: datetime
    updated_at: datetime


class CheckoutOut(CamelModel):
    order: OrderOut
    invoice_url: str | None = None
    confirmation_sent: bool = False


class ComponentsIn(CamelModel):
    """Free-form component records as captured by the build wizard."""

    components: list[dict[str, Any]]


class StoredComponentsOut(CamelModel):
    stored: int
    failed: int


class OrderItemOut(CamelModel):
    id: str
    order_id: str
    component_name: str
    component_id: str | None = None
    component_category: str | None = None
    component_details: dict[str, Any] = Field(default_factory=dict)
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class StatusUpdate(CamelModel):
    status: str
    message: str | None = None


class OrderUpdateOut(CamelModel):
    id: str
    order_id: str
    status: str
    message: str
    update_date: datetime


class TrackingUpdateOut(CamelModel):
    status: str
    status_label: str
    message: str
    update_date: datetime


class TrackingView(CamelModel):
    """Public view of an order, looked up by its tracking id."""

    tracking_id: str
    status: str
    status_label: str
    customer_name: str
    build_type: str | None = None
    order_date: datetime
    estimated_delivery: datetime
    grand_total: Optional[Decimal] = None
    components: list[str]
    updates: list[TrackingUpdateOut]
