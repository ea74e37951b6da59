import pytest

from app.services.charges import (
    calculate_build_charge,
    calculate_delivery_charge,
    calculate_gst,
    estimate_weight,
    quote_order,
)


@pytest.mark.parametrize(
    "cost, charge",
    [(0, 2500), (24999, 2500), (25000, 3500), (49999, 3500), (50000, 5000), (99999, 5000), (100000, 7500)],
)
def test_build_charge_tiers(cost, charge):
    assert calculate_build_charge(cost) == charge


@pytest.mark.parametrize("weight, charge", [(1.0, 500), (2.5, 500), (4.0, 800), (10.0, 2000), (30.0, 2000)])
def test_delivery_charge_is_clamped(weight, charge):
    assert calculate_delivery_charge(weight) == charge


def test_gst_rounds_half_up():
    assert calculate_gst(88663) == 15959
    assert calculate_gst(25) == 5  # 4.5 -> 5


def test_weight_counts_selected_types_plus_accessories(gaming_selection):
    assert estimate_weight(gaming_selection) == 12.5
    assert estimate_weight({"processor": "cpu-1", "graphics": ""}) == 1.5


def test_quote_order(gaming_selection):
    pricing = quote_order(gaming_selection)

    assert pricing.build_cost == 81663
    assert pricing.build_charge == 5000
    assert pricing.weight == 12.5
    assert pricing.delivery_charge == 2000
    assert pricing.gst == 15959
    assert pricing.total == 81663 + 5000 + 2000 + 15959
    assert pricing.as_dict()["total"] == pricing.total
