"""SQLAlchemy ORM models for vendor quotations (order-level and per component)."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.domain.mixins import TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin


class VendorQuotation(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    """A vendor's total price for a whole order, accepted or rejected by an admin."""

    __tablename__ = "vendor_quotations"
    __table_args__ = (UniqueConstraint("vendor_id", "order_id", name="uq_vendor_quotations_vendor_order"),)

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendor_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # "pending" | "accepted" | "rejected"
    status: Mapped[Optional[str]] = mapped_column(String(20), default="pending", nullable=True, index=True)

    vendor: Mapped["VendorProfile"] = relationship(back_populates="quotations", lazy="selectin")
    order: Mapped["Order"] = relationship(lazy="selectin")

    @property
    def store_name(self) -> str | None:
        return self.vendor.store_name if self.vendor else None

    @property
    def tracking_id(self) -> str | None:
        return self.order.tracking_id if self.order else None


class VendorComponentQuotation(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    """A vendor's unit price for one ordered component."""

    __tablename__ = "vendor_component_quotations"
    __table_args__ = (
        UniqueConstraint("vendor_id", "order_item_id", name="uq_vendor_component_quote_item"),
    )

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendor_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Points at customer_ordered_components.id or, for legacy orders, order_items.id
    order_item_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    component_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quoted_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    status: Mapped[Optional[str]] = mapped_column(String(20), default="pending", nullable=True)
