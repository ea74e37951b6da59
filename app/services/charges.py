"""Order pricing: build charge, weight-based delivery, GST, grand total.

All amounts are whole rupees.  Rates are read from settings so staging and
production can differ without a code change.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from app.core.config import settings
from app.services.catalog import COMPONENT_TYPES, StorageOption, calculate_total_component_cost

# Shipping weight per selected component type (kg)
COMPONENT_WEIGHTS_KG: dict[str, float] = {
    "processor": 0.5,
    "graphics": 1.5,
    "memory": 0.2,
    "storage": 0.3,
    "cooling": 1.0,
    "power": 2.0,
    "motherboard": 1.0,
    "pcCase": 5.0,
}
ACCESSORIES_WEIGHT_KG = 1.0

# (upper bound of component cost, flat assembly charge)
_BUILD_CHARGE_TIERS: tuple[tuple[int, int], ...] = (
    (25000, 2500),
    (50000, 3500),
    (100000, 5000),
)
_TOP_BUILD_CHARGE = 7500


@dataclass(frozen=True)
class OrderPricing:
    build_cost: int
    build_charge: int
    weight: float
    delivery_charge: int
    gst: int
    total: int

    def as_dict(self) -> dict:
        return asdict(self)


def estimate_weight(selection: Mapping[str, str]) -> float:
    """Shipping weight for the selected component types plus cables and accessories."""
    weight = sum(
        COMPONENT_WEIGHTS_KG[t] for t in COMPONENT_TYPES if selection.get(t)
    )
    return round(weight + ACCESSORIES_WEIGHT_KG, 2)


def calculate_build_charge(component_cost: int) -> int:
    for upper, charge in _BUILD_CHARGE_TIERS:
        if component_cost < upper:
            return charge
    return _TOP_BUILD_CHARGE


def calculate_delivery_charge(weight: float) -> int:
    raw = int(round(weight * settings.delivery_rate_per_kg))
    return min(settings.delivery_max_charge, max(settings.delivery_min_charge, raw))


def calculate_gst(subtotal: int) -> int:
    """GST on the pre-tax subtotal, rounded half-up to whole rupees."""
    amount = Decimal(subtotal) * Decimal(str(settings.gst_rate))
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def quote_order(
    selection: Mapping[str, str], extra_storage: list[StorageOption] | None = None,
) -> OrderPricing:
    build_cost = calculate_total_component_cost(selection, extra_storage)
    build_charge = calculate_build_charge(build_cost)
    weight = estimate_weight(selection)
    delivery_charge = calculate_delivery_charge(weight)
    gst = calculate_gst(build_cost + build_charge + delivery_charge)
    return OrderPricing(
        build_cost=build_cost,
        build_charge=build_charge,
        weight=weight,
        delivery_charge=delivery_charge,
        gst=gst,
        total=build_cost + build_charge + delivery_charge + gst,
    )
