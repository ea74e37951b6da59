"""SQLAlchemy ORM models for customer orders, their components, and status history."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.domain.mixins import TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class Order(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    __tablename__ = "orders"

    tracking_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)

    customer_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("customer_profiles.id", ondelete="SET NULL"), nullable=True, index=True
    )
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Shipping address captured at checkout
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    zipcode: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    build_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Server-side pricing snapshot (whole rupees)
    build_cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    build_charge: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    shipping_charge: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    gst_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    grand_total: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    weight_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(6, 2), nullable=True)

    # order_received | components_ordered | components_received | pc_building
    # | pc_testing | shipped | delivered | cancelled | processing
    status: Mapped[str] = mapped_column(String(50), default="order_received", nullable=False, index=True)
    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    estimated_delivery: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    components: Mapped[List["CustomerOrderedComponent"]] = relationship(
        back_populates="order", lazy="raise", cascade="all, delete-orphan"
    )
    updates: Mapped[List["OrderUpdate"]] = relationship(
        back_populates="order", lazy="raise", cascade="all, delete-orphan"
    )


class CustomerOrderedComponent(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    """One component the customer selected, with the hardware details captured at checkout."""

    __tablename__ = "customer_ordered_components"

    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Only set when the component exists in the `components` table (UUID id)
    component_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("components.id", ondelete="SET NULL"), nullable=True
    )
    component_name: Mapped[str] = mapped_column(String(255), nullable=False)
    component_category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    component_details: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    order: Mapped["Order"] = relationship(back_populates="components")


class OrderItem(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    """Legacy order line (name + price only); read as a fallback for older orders."""

    __tablename__ = "order_items"

    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    component_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("components.id", ondelete="SET NULL"), nullable=True
    )
    component_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price_at_time: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)


class OrderUpdate(Base, UUIDPrimaryKeyMixin, TenantMixin):
    """Append-only status history shown on the tracking page."""

    __tablename__ = "order_updates"

    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    update_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True
    )

    order: Mapped["Order"] = relationship(back_populates="updates")
