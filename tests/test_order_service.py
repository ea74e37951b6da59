import re
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import InvalidRequestError

from app.core.exceptions import NotFoundError, ValidationError
from app.repositories.catalog import ComponentRepository
from app.repositories.order import OrderItemRepository, OrderRepository
from app.repositories.tracking import TrackingFileRepository
from app.schemas.customer import CustomerCreate
from app.schemas.order import OrderCreate
from app.services.customer import CustomerService
from app.services.order import EXTRA_STORAGE_CATEGORY, OrderService, normalize_component
from app.services.tracking import default_status_message

from tests.conftest import CLIENT_ID


def _checkout(selection, **overrides) -> OrderCreate:
    payload = {
        "customer_name": "Asha Verma",
        "customer_email": "Asha@Example.com ",
        "customer_phone": "+91 98765 43210",
        "address": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "zipcode": "560001",
        "build_type": "gaming",
        "components": selection,
    }
    payload.update(overrides)
    return OrderCreate(**payload)


@pytest.fixture
def svc(session):
    return OrderService(session, CLIENT_ID)


# ---------------------------------------------------------------------------
# normalize_component
# ---------------------------------------------------------------------------

def test_normalize_component_accepts_aliases():
    row = normalize_component(
        {"model_name": "RTX 3060", "component_type": "graphics", "unit_price": "24799", "quantity": 2}
    )
    assert row["component_name"] == "RTX 3060"
    assert row["component_category"] == "graphics"
    assert row["unit_price"] == Decimal("24799")
    assert row["total_price"] == Decimal("49598")
    assert row["component_details"]["description"] == "RTX 3060"


def test_normalize_component_top_level_specs_win_over_nested():
    row = normalize_component(
        {
            "name": "Ryzen 5",
            "category": "processor",
            "price": 11179,
            "cores": 6,
            "component_details": {"cores": 8, "clock_speed": 3.7, "original_name": "ignored"},
        }
    )
    details = row["component_details"]
    assert details["cores"] == 6
    assert details["clock_speed"] == 3.7
    assert details["original_name"] == "Ryzen 5"


def test_normalize_component_moves_non_uuid_id_to_reference():
    row = normalize_component({"id": "cpu-2", "name": "Ryzen 5", "price": 1})
    assert row["component_id"] is None
    assert row["component_details"]["reference_id"] == "cpu-2"

    real = str(uuid.uuid4())
    assert normalize_component({"id": real, "name": "x", "price": 1})["component_id"] == real


def test_normalize_component_defaults():
    row = normalize_component({})
    assert row["component_name"] == "Unknown Component"
    assert row["component_category"] == "Unknown Category"
    assert row["quantity"] == 1
    assert row["unit_price"] == 0


@pytest.mark.parametrize(
    "bad",
    [
        {"price": -1},
        {"price": "abc"},
        {"price": "NaN"},
        {"price": "Infinity"},
        {"price": 10, "quantity": -1},
        {"price": 10, "quantity": "two"},
    ],
)
def test_normalize_component_rejects_bad_numbers(bad):
    with pytest.raises(ValueError):
        normalize_component({"name": "Thing", **bad})


# ---------------------------------------------------------------------------
# create_order
# ---------------------------------------------------------------------------

async def test_create_order_prices_from_catalog(svc, gaming_selection):
    order = await svc.create_order(_checkout(gaming_selection))

    assert re.fullmatch(r"NXB-\d{4}-[A-Z0-9]{10}", order.tracking_id)
    assert order.customer_email == "asha@example.com"
    assert order.status == "order_received"
    assert order.build_cost == 81663
    assert order.build_charge == 5000
    assert order.shipping_charge == 2000
    assert order.gst_amount == 15959
    assert order.grand_total == 104622
    assert order.weight_kg == Decimal("12.5")
    assert order.estimated_delivery - order.order_date == timedelta(days=14)


async def test_create_order_stores_lines_and_first_update(svc, gaming_selection):
    order = await svc.create_order(_checkout(gaming_selection, extra_storage=["seagate-2tb"]))

    lines = await svc.fetch_order_items(order.id)
    assert len(lines) == 9
    by_category = {line.component_category: line for line in lines}
    assert by_category["processor"].component_name == "AMD Ryzen 5 5600X (6C/12T)"
    assert by_category["processor"].component_details["reference_id"] == "cpu-2"
    assert by_category[EXTRA_STORAGE_CATEGORY].total_price == 5499
    assert order.build_cost == 81663 + 5499

    updates = await svc.list_updates(order.id)
    assert [(u.status, u.message) for u in updates] == [
        ("order_received", default_status_message("order_received"))
    ]


async def test_create_order_links_existing_customer(session, svc, gaming_selection):
    customer = await CustomerService(session, CLIENT_ID).create_customer(
        CustomerCreate(email="asha@example.com", full_name="Asha Verma")
    )
    order = await svc.create_order(_checkout(gaming_selection))
    assert order.customer_id == customer.id


@pytest.mark.parametrize(
    "components, extras, message",
    [
        ({"monitor": "mon-1"}, [], "Unknown component type(s): monitor"),
        ({"processor": ""}, [], "At least one component must be selected"),
        ({"processor": "cpu-99"}, [], "Unknown processor 'cpu-99'"),
        ({"processor": "cpu-1"}, ["floppy"], "Unknown storage option 'floppy'"),
    ],
)
async def test_create_order_rejects_bad_selection(svc, components, extras, message):
    with pytest.raises(ValidationError) as exc:
        await svc.create_order(_checkout(components, extra_storage=extras))
    assert exc.value.message == message


async def test_lookup_by_tracking_id_is_forgiving(svc, gaming_selection):
    order = await svc.create_order(_checkout(gaming_selection))
    found = await svc.get_order_by_tracking_id(f"  {order.tracking_id.lower()} ")
    assert found.id == order.id

    with pytest.raises(NotFoundError):
        await svc.get_order_by_tracking_id("NXB-0000-NOPE")


async def test_track_summary(svc, gaming_selection):
    order = await svc.create_order(_checkout(gaming_selection))
    await svc.update_order_status(order.id, "pc_building")

    view = await svc.track(order.tracking_id)
    assert view["status"] == "pc_building"
    assert view["status_label"] == "PC Building"
    assert "Noctua NH-D15 Air Cooler" in view["components"]
    assert [u["status"] for u in view["updates"]] == ["order_received", "pc_building"]


async def test_list_orders_filters_by_email(svc, gaming_selection):
    from app.core.pagination import PaginationParams

    await svc.create_order(_checkout(gaming_selection))
    await svc.create_order(_checkout(gaming_selection, customer_email="ravi@example.com"))

    items, total = await svc.list_orders(PaginationParams.of(), customer_email="RAVI@example.com")
    assert total == 1
    assert items[0].customer_email == "ravi@example.com"


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------

async def test_status_update_logs_and_keeps_one_tracking_marker(session, svc, gaming_selection):
    order = await svc.create_order(_checkout(gaming_selection))

    updated = await svc.update_order_status(order.id, "components_ordered")
    assert updated.status == "components_ordered"
    await svc.update_order_status(order.id, "shipped", "Handed to BlueDart")

    files = TrackingFileRepository(session, CLIENT_ID)
    markers = await files.all_by(order_id=order.id, file_type="tracking")
    assert len(markers) == 1
    assert markers[0].file_name == f"tracking_{order.tracking_id}"

    updates = await svc.list_updates(order.id)
    assert [u.message for u in updates][1:] == [
        default_status_message("components_ordered"),
        "Handed to BlueDart",
    ]


async def test_status_update_rejects_unknown_status(svc, gaming_selection):
    order = await svc.create_order(_checkout(gaming_selection))
    with pytest.raises(ValidationError):
        await svc.update_order_status(order.id, "teleported")


async def test_status_update_missing_order(svc):
    with pytest.raises(NotFoundError):
        await svc.update_order_status("missing", "shipped")


async def test_delete_order_is_soft(svc, gaming_selection):
    order = await svc.create_order(_checkout(gaming_selection))
    await svc.delete_order(order.id)

    with pytest.raises(NotFoundError):
        await svc.get_order(order.id)
    with pytest.raises(NotFoundError):
        await svc.delete_order(order.id)


async def test_order_collections_are_never_lazy_loaded(svc, session, gaming_selection):
    created = await svc.create_order(_checkout(gaming_selection))
    session.expunge_all()

    order = await svc.get_order(created.id)
    with pytest.raises(InvalidRequestError):
        len(order.components)
    with pytest.raises(InvalidRequestError):
        len(order.updates)


# ---------------------------------------------------------------------------
# Order lines
# ---------------------------------------------------------------------------

async def _bare_order(session) -> str:
    from app.domain.mixins import utcnow

    order = await OrderRepository(session, CLIENT_ID).create(
        tracking_id="NXB-2501-LEGACY0001",
        customer_name="Old Customer",
        customer_email="old@example.com",
        estimated_delivery=utcnow() + timedelta(days=14),
    )
    return order.id


async def test_store_components_counts_failures(session, svc):
    order_id = await _bare_order(session)
    part = await ComponentRepository(session, CLIENT_ID).create(
        name="Noctua NH-D15", category="cooling", price=Decimal("6500"),
    )
    orphan = str(uuid.uuid4())

    stored, failed = await svc.store_customer_ordered_components(
        order_id,
        [
            {"id": part.id, "name": "Noctua NH-D15", "category": "cooling", "price": 6500},
            {"id": orphan, "name": "Mystery Fan", "category": "cooling", "price": 900},
            {"name": "Broken", "price": -10},
        ],
    )
    assert (stored, failed) == (2, 1)

    lines = {line.component_name: line for line in await svc.fetch_order_items(order_id)}
    assert lines["Noctua NH-D15"].component_id == part.id
    assert lines["Mystery Fan"].component_id is None
    assert lines["Mystery Fan"].component_details["reference_id"] == orphan


async def test_store_components_validation(session, svc):
    with pytest.raises(ValidationError):
        await svc.store_customer_ordered_components("  ", [{"name": "x"}])
    order_id = await _bare_order(session)
    with pytest.raises(ValidationError):
        await svc.store_customer_ordered_components(order_id, [])
    with pytest.raises(NotFoundError):
        await svc.store_customer_ordered_components("missing", [{"name": "x"}])


async def test_fetch_order_items_falls_back_to_legacy_rows(session, svc):
    order_id = await _bare_order(session)
    await OrderItemRepository(session, CLIENT_ID).create(
        order_id=order_id, component_name="Old GPU", price_at_time=Decimal("12000"), quantity=2,
    )

    (line,) = await svc.fetch_order_items(order_id)
    assert line.component_category is None
    assert line.total_price == Decimal("24000")
    assert line.component_details == {
        "name": "Old GPU", "category": "Component", "description": "Old GPU",
    }


async def test_fetch_order_items_blank_id(svc):
    assert await svc.fetch_order_items(" ") == []
