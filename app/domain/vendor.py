"""SQLAlchemy ORM models for vendors: store profiles, win/loss stats, processed orders."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.domain.mixins import TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class VendorProfile(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    __tablename__ = "vendor_profiles"

    store_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    vendor_name: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    store_address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    contact_email: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # "active" | "inactive" | "suspended"
    status: Mapped[str] = mapped_column(String(50), default="active", nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    stats: Mapped[Optional["VendorStats"]] = relationship(
        back_populates="vendor", lazy="selectin", uselist=False
    )
    quotations: Mapped[List["VendorQuotation"]] = relationship(
        back_populates="vendor", lazy="raise"
    )


class VendorStats(Base, TenantMixin):
    """Running count of orders a vendor won or lost (one row per vendor)."""

    __tablename__ = "vendor_stats"

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendor_profiles.id", ondelete="CASCADE"), primary_key=True
    )
    orders_won: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    orders_lost: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    vendor: Mapped["VendorProfile"] = relationship(back_populates="stats")


class VendorOrder(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    """Marks an order as processed (accepted / rejected) for a vendor."""

    __tablename__ = "vendor_orders"
    __table_args__ = (UniqueConstraint("vendor_id", "order_id", name="uq_vendor_orders_vendor_order"),)

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendor_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # "pending" | "accepted" | "rejected"
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
