import re
from datetime import datetime
from decimal import Decimal

import pytest

from app.services.tracking import (
    OrderStatus,
    default_status_message,
    format_currency,
    format_date,
    format_order_status,
    generate_tracking_code,
    status_label,
)


def test_tracking_code_shape():
    code = generate_tracking_code(datetime(2025, 3, 5))
    assert re.fullmatch(r"NXB-2503-[A-Z0-9]{10}", code)


def test_tracking_codes_are_random():
    assert len({generate_tracking_code() for _ in range(50)}) == 50


def test_labels_and_messages():
    assert status_label(OrderStatus.PC_BUILDING) == "PC Building"
    assert status_label("shipped") == "Shipped"
    assert status_label("lost_in_space") == "Unknown Status"
    assert default_status_message("delivered") == "Your PC has been delivered. Enjoy your new build!"
    assert default_status_message("weird") == "Your order status has been updated."


@pytest.mark.parametrize(
    "raw, expected",
    [("pc_building", "Pc Building"), ("order_received", "Order Received"), ("", "Unknown"), (None, "Unknown")],
)
def test_format_order_status(raw, expected):
    assert format_order_status(raw) == expected


def test_format_currency():
    assert format_currency(1234.5) == "₹1,234.50"
    assert format_currency(Decimal("104622")) == "₹1,04,622.00"
    assert format_currency(0) == "₹0.00"


def test_format_date():
    moment = datetime(2025, 3, 5, 14, 30)
    assert format_date(moment) == "Mar 5, 2025"
    assert format_date(moment, include_time=True) == "Mar 5, 2025, 02:30 PM"
    assert format_date("2025-03-05T14:30:00Z") == "Mar 5, 2025"
    assert format_date(None) == ""
