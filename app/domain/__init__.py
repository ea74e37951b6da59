"""Domain package: all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  order.py      - orders, ordered components, legacy order items, status history
  vendor.py     - vendor store profiles, win/loss stats, processed-order markers
  quotation.py  - order-level and per-component vendor quotations
  customer.py   - customer profiles
  tracking.py   - files attached to orders (invoices, tracking markers)
  catalog.py    - stocked components referenced by order lines
  audit.py      - Immutable audit trail (never updated or deleted)
  mixins.py     - Shared UUID key, TimestampMixin, TenantMixin
"""

from app.domain.audit import AuditTrail
from app.domain.catalog import Component
from app.domain.customer import CustomerProfile
from app.domain.order import CustomerOrderedComponent, Order, OrderItem, OrderUpdate
from app.domain.quotation import VendorComponentQuotation, VendorQuotation
from app.domain.tracking import TrackingFile
from app.domain.vendor import VendorOrder, VendorProfile, VendorStats

__all__ = [
    "AuditTrail",
    "Component",
    "CustomerOrderedComponent",
    "CustomerProfile",
    "Order",
    "OrderItem",
    "OrderUpdate",
    "TrackingFile",
    "VendorComponentQuotation",
    "VendorOrder",
    "VendorProfile",
    "VendorQuotation",
    "VendorStats",
]
