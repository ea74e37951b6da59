from decimal import Decimal

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.order import OrderCreate
from app.schemas.vendor import VendorCreate
from app.services.order import OrderService
from app.services.quotation import (
    ACCEPTED_MESSAGE,
    QuotationService,
    component_display_name,
    infer_component_category,
)
from app.services.vendor import VendorService

from tests.conftest import CLIENT_ID


class RecordingMailer:
    def __init__(self):
        self.sent = []

    async def send_quotation_decision(self, to, store_name, tracking_id, status, amount):
        self.sent.append((to, store_name, tracking_id, status, amount))
        return True


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def quotations(session, mailer):
    return QuotationService(session, CLIENT_ID, mailer)


@pytest.fixture
async def vendor(session):
    return await VendorService(session, CLIENT_ID).create_vendor(
        VendorCreate(store_name="Prime Components", vendor_name="Karan", contact_email="sales@prime.example")
    )


@pytest.fixture
async def order(session):
    return await OrderService(session, CLIENT_ID).create_order(
        OrderCreate(
            customer_name="Asha Verma",
            customer_email="asha@example.com",
            build_type="gaming",
            components={"processor": "cpu-2", "graphics": "gpu-4"},
        )
    )


@pytest.fixture
async def lines(session, order):
    items = await OrderService(session, CLIENT_ID).fetch_order_items(order.id)
    return {line.component_category: line for line in items}


# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "name, category",
    [
        ("AMD Ryzen 5 5600X", "processor"),
        ("GIGABYTE RTX 3060", "graphics"),
        ("Corsair Vengeance DDR5", "memory"),
        ("Samsung 980 Pro NVMe", "storage"),
        ("Noctua Cooler", "cooling"),
        ("Corsair 850W PSU", "power"),
        ("NZXT H510 Case", "pcCase"),
        ("Mystery widget", "other"),
    ],
)
def test_infer_component_category(name, category):
    assert infer_component_category(name) == category


def test_display_name_for_specs():
    assert component_display_name(
        "Ryzen", "processor", {"brand": "AMD", "model": "Ryzen 5 5600X", "cores": 6, "clock_speed": 3.7},
    ) == "AMD Ryzen 5 5600X (6 cores, 3.7GHz)"
    assert component_display_name(
        "GPU", "graphics", {"brand": "GIGABYTE", "model": "RTX 3060", "vram": 12},
    ) == "GIGABYTE RTX 3060 (12GB VRAM)"
    assert component_display_name(
        "GPU", "gpu", {"brand": "MSI", "model": "RTX 4070", "memory": 12},
    ) == "MSI RTX 4070 (12GB VRAM)"
    assert component_display_name(
        "CPU", "cpu", {"brand": "Intel", "model": "Core i5-13400F", "cores": 10},
    ) == "Intel Core i5-13400F (10 cores)"
    assert component_display_name(
        "RAM", None, {"category": "memory", "brand": "Crucial", "model": "PRO", "capacity": 32, "speed": 5600},
    ) == "Crucial PRO 32GB 5600MHz"


def test_display_name_fallbacks():
    assert component_display_name("Stored", "cooling", {"original_name": "Noctua NH-D15"}) == "Noctua NH-D15"
    assert component_display_name("Stored", "cooling", {}) == "Stored"
    assert component_display_name("Stored", "cooling", None) == "Stored"


def test_display_name_needs_brand_and_model():
    assert component_display_name(
        "AMD Ryzen 5 5600X", "processor",
        {"original_name": "AMD Ryzen 5 5600X", "cores": 6, "clock_speed": 3.7},
    ) == "AMD Ryzen 5 5600X"
    assert component_display_name(
        "Stored", "cooling", {"original_name": "Noctua NH-D15", "brand": "Noctua"},
    ) == "Noctua NH-D15"
    assert component_display_name("Stored", "ram", {"model": "Vengeance", "capacity": 16}) == "Stored"


# ---------------------------------------------------------------------------
# Component quotes
# ---------------------------------------------------------------------------

async def test_submit_quote_uses_stored_component_name(quotations, vendor, order, lines):
    cpu = lines["processor"]
    quote = await quotations.submit_component_quote(
        vendor.id, order.id, cpu.id, Decimal("10999"), component_name="whatever",
    )
    assert quote.component_name == "AMD Ryzen 5 5600X (6C/12T)"
    assert quote.status == "pending"


async def test_resubmitting_revises_the_same_quote(quotations, vendor, order, lines):
    cpu = lines["processor"]
    await quotations.submit_component_quote(vendor.id, order.id, cpu.id, 10999)
    await quotations.submit_component_quote(vendor.id, order.id, cpu.id, 10499, quantity=2)

    (quote,) = await quotations.list_component_quotes(vendor.id, order.id)
    assert quote.quoted_price == Decimal("10499")
    assert quote.quantity == 2


async def test_unknown_line_uses_given_name(quotations, vendor, order):
    quote = await quotations.submit_component_quote(vendor.id, order.id, "line-x", 100, "Thermal paste")
    assert quote.component_name == "Thermal paste"
    other = await quotations.submit_component_quote(vendor.id, order.id, "line-y", 100)
    assert other.component_name == "Component"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"quoted_price": -1},
        {"quoted_price": 10, "quantity": 0},
        {"quoted_price": 10, "order_item_id": ""},
    ],
)
async def test_submit_quote_validation(quotations, vendor, order, kwargs):
    args = {"order_item_id": "line-1", **kwargs}
    with pytest.raises(ValidationError):
        await quotations.submit_component_quote(vendor.id, order.id, **args)


async def test_submit_quote_unknown_vendor_or_order(quotations, vendor, order):
    with pytest.raises(NotFoundError):
        await quotations.submit_component_quote("nope", order.id, "line-1", 10)
    with pytest.raises(NotFoundError):
        await quotations.submit_component_quote(vendor.id, "nope", "line-1", 10)


async def test_component_quotations_merge_quotes_with_lines(quotations, vendor, order, lines):
    cpu, gpu = lines["processor"], lines["graphics"]
    await quotations.submit_component_quote(vendor.id, order.id, cpu.id, 10999)

    rows = {r["order_item_id"]: r for r in await quotations.get_component_quotations(vendor.id, order.id)}
    assert rows[cpu.id]["quoted_price"] == Decimal("10999")
    assert rows[gpu.id]["quoted_price"] == gpu.unit_price
    assert rows[gpu.id]["status"] == "pending"
    assert rows[gpu.id]["component_name"] == "GIGABYTE GeForce RTX 3060 (12GB GDDR6)"


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

async def _quote_all(quotations, vendor, order, lines):
    await quotations.submit_component_quote(vendor.id, order.id, lines["processor"].id, 10999)
    await quotations.submit_component_quote(vendor.id, order.id, lines["graphics"].id, 12000, quantity=2)


async def test_accepting_moves_order_and_counts_a_win(session, quotations, mailer, vendor, order, lines):
    await _quote_all(quotations, vendor, order, lines)

    quotation = await quotations.decide_quotation(vendor.id, order.id, "accepted")
    assert quotation.price == Decimal("34999")
    assert quotation.status == "accepted"
    assert quotation.store_name == "Prime Components"
    assert quotation.tracking_id == order.tracking_id

    orders = OrderService(session, CLIENT_ID)
    assert (await orders.get_order(order.id)).status == "processing"
    assert (await orders.list_updates(order.id))[-1].message == ACCEPTED_MESSAGE

    vendors = VendorService(session, CLIENT_ID)
    assert (await vendors.get_stats(vendor.id)).orders_won == 1
    assert await vendors.processed_order_ids(vendor.id) == [order.id]
    assert {q.status for q in await quotations.list_component_quotes(vendor.id, order.id)} == {"accepted"}

    assert mailer.sent == [
        ("sales@prime.example", "Prime Components", order.tracking_id, "accepted", Decimal("34999"))
    ]


async def test_repeating_a_decision_does_not_recount(session, quotations, vendor, order, lines):
    await _quote_all(quotations, vendor, order, lines)
    await quotations.decide_quotation(vendor.id, order.id, "accepted")
    await quotations.decide_quotation(vendor.id, order.id, "accepted")

    stats = await VendorService(session, CLIENT_ID).get_stats(vendor.id)
    assert (stats.orders_won, stats.orders_lost) == (1, 0)
    updates = await OrderService(session, CLIENT_ID).list_updates(order.id)
    assert [u.status for u in updates] == ["order_received", "processing"]


async def test_rejecting_counts_a_loss_and_leaves_order(session, quotations, vendor, order, lines):
    await _quote_all(quotations, vendor, order, lines)
    await quotations.decide_quotation(vendor.id, order.id, "rejected")

    stats = await VendorService(session, CLIENT_ID).get_stats(vendor.id)
    assert (stats.orders_won, stats.orders_lost) == (0, 1)
    assert (await OrderService(session, CLIENT_ID).get_order(order.id)).status == "order_received"


async def test_pending_decision_sends_no_mail(quotations, mailer, vendor, order, lines):
    await _quote_all(quotations, vendor, order, lines)
    await quotations.decide_quotation(vendor.id, order.id, "pending")
    assert mailer.sent == []


async def test_invalid_decision(quotations, vendor, order):
    with pytest.raises(ValidationError):
        await quotations.decide_quotation(vendor.id, order.id, "maybe")


async def test_list_and_totals(quotations, vendor, order, lines):
    from app.core.pagination import PaginationParams

    await _quote_all(quotations, vendor, order, lines)
    await quotations.decide_quotation(vendor.id, order.id, "accepted")

    items, total = await quotations.list_quotations(PaginationParams.of(), status="accepted")
    assert total == 1 and items[0].order_id == order.id
    _, none = await quotations.list_quotations(PaginationParams.of(), status="rejected")
    assert none == 0

    (row,) = await quotations.vendor_quotation_totals()
    assert row["store_name"] == "Prime Components"
    assert row["quotation_count"] == 1
    assert row["accepted_value"] == Decimal("34999")
