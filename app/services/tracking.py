"""Order tracking vocabulary: tracking codes, status labels, display formatting."""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from app.services.catalog import indian_grouping

TRACKING_PREFIX = "NXB"
_CODE_ALPHABET = string.ascii_uppercase + string.digits
_CODE_LENGTH = 10


class OrderStatus(str, Enum):
    ORDER_RECEIVED = "order_received"
    COMPONENTS_ORDERED = "components_ordered"
    COMPONENTS_RECEIVED = "components_received"
    PC_BUILDING = "pc_building"
    PC_TESTING = "pc_testing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    PROCESSING = "processing"


_LABELS: dict[str, str] = {
    "order_received": "Order Received",
    "components_ordered": "Components Ordered",
    "components_received": "Components Received",
    "pc_building": "PC Building",
    "pc_testing": "PC Testing",
    "shipped": "Shipped",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
    "processing": "Processing",
}

_DEFAULT_MESSAGES: dict[str, str] = {
    "order_received": "Your order has been received and is being processed.",
    "components_ordered": "Components for your build have been ordered from our suppliers.",
    "components_received": "All components for your build have arrived at our workshop.",
    "pc_building": "Your PC build is now in progress by our expert technicians.",
    "pc_testing": (
        "Your PC is undergoing our rigorous testing process to ensure everything works perfectly."
    ),
    "shipped": "Your PC has been shipped and is on its way to you.",
    "delivered": "Your PC has been delivered. Enjoy your new build!",
    "cancelled": "Your order has been cancelled.",
    "processing": "Your order is being processed.",
}


def _value(status: OrderStatus | str) -> str:
    return status.value if isinstance(status, OrderStatus) else str(status)


def generate_tracking_code(now: datetime | None = None) -> str:
    """Return ``NXB-YYMM-XXXXXXXXXX`` with a random upper-case alphanumeric suffix."""
    now = now or datetime.now(timezone.utc)
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(_CODE_LENGTH))
    return f"{TRACKING_PREFIX}-{now:%y%m}-{suffix}"


def status_label(status: OrderStatus | str) -> str:
    return _LABELS.get(_value(status), "Unknown Status")


def default_status_message(status: OrderStatus | str) -> str:
    return _DEFAULT_MESSAGES.get(_value(status), "Your order status has been updated.")


def format_order_status(status: str | None) -> str:
    """``pc_building`` → ``Pc Building``; empty → ``Unknown``."""
    if not status:
        return "Unknown"
    words = status.replace("_", " ").split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def format_currency(amount: float | Decimal) -> str:
    """INR with Indian digit grouping and two decimals, e.g. ``₹1,23,456.50``."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    return f"{sign}₹{indian_grouping(whole)}.{fraction}"


def format_date(value: datetime | str | None, include_time: bool = False) -> str:
    """``Mar 5, 2025`` or ``Mar 5, 2025, 02:30 PM``; blank input → ``""``."""
    if not value:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    text = f"{value:%b} {value.day}, {value:%Y}"
    if include_time:
        text += f", {value:%I:%M %p}"
    return text
