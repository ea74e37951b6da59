"""SQLAlchemy ORM model for files attached to an order (invoices, tracking markers)."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.domain.mixins import TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin


class TrackingFile(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    __tablename__ = "tracking_files"

    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # "invoice" | "tracking"
    file_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # Empty for "tracking" marker rows
    file_url: Mapped[str] = mapped_column(String(1000), default="", nullable=False)
