"""Component price catalog and budget-driven build recommendations.

Everything here is pure: the catalog is a static, read-only price list (whole
rupees) and the helpers never mutate it.  The recommendation heuristic splits a
budget across component types by build profile, picks the best part that fits
each share, then reconciles CPU/motherboard sockets.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

COMPONENT_TYPES: tuple[str, ...] = (
    "processor",
    "graphics",
    "memory",
    "storage",
    "cooling",
    "power",
    "motherboard",
    "pcCase",
)


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    price: int


@dataclass(frozen=True)
class StorageOption(CatalogItem):
    type: str = "ssd"


@dataclass
class BuildRecommendation:
    name: str
    description: str
    total_price: int
    components: dict[str, str] = field(default_factory=dict)


def _items(*rows: tuple[str, str, int]) -> tuple[CatalogItem, ...]:
    return tuple(CatalogItem(id=i, name=n, price=p) for i, n, p in rows)


COMPONENT_PRICES: Mapping[str, tuple[CatalogItem, ...]] = {
    "processor": _items(
        ("cpu-1", "AMD Ryzen 5 5500 (6C/12T)", 6899),
        ("cpu-2", "AMD Ryzen 5 5600X (6C/12T)", 11179),
        ("cpu-3", "AMD Ryzen 5 9600X (6C/12T)", 25629),
        ("cpu-4", "Intel Core i5-12400F (6C/12T)", 9699),
        ("cpu-5", "Intel Core i7-12700 (12C/20T)", 25899),
        ("cpu-6", "AMD Ryzen 3 5300G (4C/8T)", 10976),
        ("cpu-7", "Intel Xeon Gold 5118 (12C/24T)", 34756),
        ("cpu-8", "AMD Ryzen Threadripper PRO 7965WX (24C/48T)", 349990),
    ),
    "graphics": _items(
        ("gpu-1", "Zotac GeForce GTX 1650 (4GB GDDR6)", 16499),
        ("gpu-2", "INNO3D GeForce RTX 3050 (8GB GDDR6)", 19099),
        ("gpu-3", "ASUS Dual Radeon RX 6600 (8GB GDDR6)", 20849),
        ("gpu-4", "GIGABYTE GeForce RTX 3060 (12GB GDDR6)", 24799),
        ("gpu-5", "GIGABYTE GeForce RTX 4060 Ti (8GB GDDR6)", 40089),
        ("gpu-6", "PNY GeForce RTX 4090 Verto (24GB GDDR6X)", 305999),
        ("gpu-7", "Asus Phoenix Radeon PH-550-2G (2GB GDDR5)", 7020),
    ),
    "memory": _items(
        ("ram-1", "ADATA XPG Gammix D30 DDR4-3200 16GB (8GBx2)", 3500),
        ("ram-2", "Patriot Signature Premium DDR5-5600 24GB", 9486),
        ("ram-3", "ADATA XPG Gammix D35G DDR4-3200 32GB", 4899),
        ("ram-4", "Kingston ValueRAM KVR32N22S8L/8 DDR4-3200 8GB", 1299),
        ("ram-5", "CORSAIR Vengeance RGB DDR5-5200 16GB", 4828),
        ("ram-6", "Crucial PRO DDR5-5600 32GB", 8799),
    ),
    "storage": _items(
        ("storage-1", "Crucial P3 Plus NVMe Gen4 500GB", 3150),
        ("storage-2", "Samsung 980 Pro NVMe Gen4 1TB", 9000),
        ("storage-3", "WD SN850X NVMe Gen4 1TB", 9500),
        ("storage-4", "Samsung 980 Pro NVMe Gen4 2TB", 15000),
        ("storage-5", "WD SN850X NVMe Gen4 2TB", 16000),
    ),
    "cooling": _items(
        ("cooling-1", "Cooler Master ML240L V2 240mm AIO", 7500),
        ("cooling-2", "Noctua NH-D15 Air Cooler", 6500),
    ),
    "power": _items(
        ("psu-1", "Cooler Master MWE 750W 80+ Gold", 7500),
        ("psu-2", "Corsair RM850x 850W 80+ Gold", 9500),
    ),
    "motherboard": _items(
        ("mobo-1", "ZEBRONICS H61-NVMe (LGA 1155)", 1184),
        ("mobo-2", "MSI PRO H610M-E DDR4 (LGA 1700)", 5999),
        ("mobo-3", "GIGABYTE H610M S2H DDR4 (LGA 1700)", 7199),
        ("mobo-4", "ASRock Z890 Pro RS WiFi (LGA 1700)", 26868),
    ),
    "pcCase": _items(
        ("case-1", "NZXT H510 Mid-Tower ATX (Tempered Glass, RGB)", 5500),
        ("case-2", "Lian Li PC-O11 Dynamic ATX Premium Build", 9500),
    ),
}

EXTRA_STORAGE_OPTIONS: tuple[StorageOption, ...] = (
    StorageOption(id="western-digital-1tb", name="Western Digital 1TB HDD", price=3499, type="hdd"),
    StorageOption(id="seagate-2tb", name="Seagate 2TB HDD", price=5499, type="hdd"),
    StorageOption(id="samsung-500gb", name="Samsung 500GB SSD", price=5999, type="ssd"),
    StorageOption(id="crucial-1tb", name="Crucial 1TB SSD", price=8999, type="ssd"),
    StorageOption(id="wd-black-1tb-nvme", name="WD Black 1TB NVMe SSD", price=12999, type="nvme"),
    StorageOption(id="samsung-980-pro-1tb", name="Samsung 980 Pro 1TB NVMe", price=16999, type="nvme"),
)

COMPONENT_LABELS: dict[str, str] = {
    "processor": "CPU",
    "graphics": "Graphics Card",
    "memory": "RAM",
    "storage": "Storage",
    "cooling": "Cooling Solution",
    "power": "Power Supply",
    "motherboard": "Motherboard",
    "pcCase": "PC Case",
}

# Price ranges behind the named budget tiers offered in the build wizard
BUDGET_TIERS: dict[str, tuple[int, int]] = {
    "budget": (40000, 60000),
    "midrange": (60000, 120000),
    "highend": (120000, 200000),
    "extreme": (200000, 500000),
}

_BASE_ALLOCATION: dict[str, float] = {
    "processor": 0.2,
    "graphics": 0.3,
    "memory": 0.1,
    "storage": 0.1,
    "cooling": 0.05,
    "power": 0.08,
    "motherboard": 0.12,
    "pcCase": 0.05,
}

_ALLOCATION_OVERRIDES: dict[str, dict[str, float]] = {
    "gaming": {"graphics": 0.35, "processor": 0.18},
    "GPU-Focused": {"graphics": 0.35, "processor": 0.18},
    "productivity": {"processor": 0.3, "memory": 0.15, "graphics": 0.2},
    "CPU-Focused": {"processor": 0.3, "memory": 0.15, "graphics": 0.2},
    "streaming": {"processor": 0.25, "memory": 0.12},
    "budget": {"processor": 0.22, "graphics": 0.25},
}

# Processor and GPU picks keep ~15% of their share in reserve
_HEADROOM_TYPES = frozenset({"processor", "graphics"})
_HEADROOM = 0.85

_SOCKET_RE = re.compile(r"\(LGA \d+\)|\(AM\d\+?\)", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def indian_grouping(digits: str) -> str:
    """Group a string of digits the Indian way: ``1234567`` → ``12,34,567``."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_price(price: float) -> str:
    """Format whole rupees with Indian digit grouping, e.g. ``₹1,23,456``."""
    rounded = int(round(price))
    sign = "-" if rounded < 0 else ""
    return f"{sign}₹{indian_grouping(str(abs(rounded)))}"


def get_component_details(component_type: str, component_id: str) -> CatalogItem | None:
    for item in COMPONENT_PRICES.get(component_type, ()):
        if item.id == component_id:
            return item
    return None


def get_component_price(component_type: str, component_id: str) -> int:
    item = get_component_details(component_type, component_id)
    return item.price if item else 0


def get_storage_option(option_id: str) -> StorageOption | None:
    return next((o for o in EXTRA_STORAGE_OPTIONS if o.id == option_id), None)


def resolve_storage_options(option_ids: Iterable[str]) -> list[StorageOption]:
    """Catalog entries for the given extra-storage ids; unknown ids are rejected."""
    options = []
    for option_id in option_ids:
        option = get_storage_option(option_id)
        if option is None:
            raise ValidationError(f"Unknown storage option '{option_id}'")
        options.append(option)
    return options


def calculate_build_cost(components: Mapping[str, str]) -> int:
    """Sum the catalog prices of the selected ids; unknown ids count as zero."""
    return sum(
        get_component_price(component_type, component_id)
        for component_type, component_id in components.items()
        if component_id
    )


def calculate_total_component_cost(
    selection: Mapping[str, str], extra_storage: list[StorageOption] | None = None,
) -> int:
    """Catalog cost of the selection plus any additional storage drives."""
    total = calculate_build_cost({t: selection.get(t, "") for t in COMPONENT_TYPES})
    for option in extra_storage or ():
        total += option.price
    return total


def get_components_within_budget(
    component_type: str, budget: int, selected: Mapping[str, str],
) -> list[CatalogItem]:
    """Items of *component_type* that fit the budget left by the other selections."""
    available = COMPONENT_PRICES.get(component_type)
    if not available:
        logger.warning("No components found for type: %s", component_type)
        return []

    others_cost = sum(
        get_component_price(t, cid)
        for t, cid in selected.items()
        if t != component_type and cid
    )
    remaining = budget - others_cost
    return [item for item in available if item.price <= remaining]


def get_components_by_category(build_type: str, budget_tier: str) -> dict[str, list[CatalogItem]]:
    """Catalog per type, trimmed for entry-level gaming tiers."""
    budget_min, _ = BUDGET_TIERS.get(budget_tier, (0, 0))
    logger.debug("Listing components for build type %s and tier %s", build_type, budget_tier)

    trim = build_type == "gaming" and budget_tier == "budget"
    result: dict[str, list[CatalogItem]] = {}
    for component_type in COMPONENT_TYPES:
        items = list(COMPONENT_PRICES[component_type])
        if trim and component_type == "processor":
            items = [c for c in items if c.price <= budget_min * 0.25]
        elif trim and component_type == "graphics":
            items = [c for c in items if c.price <= budget_min * 0.4]
        result[component_type] = items
    return result


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------

def _allocation_for(build_type: str) -> dict[str, float]:
    allocation = dict(_BASE_ALLOCATION)
    allocation.update(_ALLOCATION_OVERRIDES.get(build_type, {}))
    return allocation


def _cheapest(component_type: str) -> CatalogItem:
    return min(COMPONENT_PRICES[component_type], key=lambda c: c.price)


def _pick_within(component_type: str, cap: int) -> CatalogItem:
    fitting = sorted(
        (c for c in COMPONENT_PRICES[component_type] if c.price <= cap),
        key=lambda c: c.price,
        reverse=True,
    )
    if not fitting:
        return _cheapest(component_type)
    if component_type in _HEADROOM_TYPES:
        threshold = cap * _HEADROOM
        for candidate in fitting:
            if candidate.price <= threshold:
                return candidate
    return fitting[0]


def _socket_of(name: str) -> str:
    match = _SOCKET_RE.search(name)
    return match.group(0).strip("()") if match else ""


def get_recommended_build(build_type: str, budget: int) -> dict[str, str]:
    """Choose one catalog id per component type for *build_type* within *budget*."""
    allocation = _allocation_for(build_type)
    caps = {t: math.floor(budget * share) for t, share in allocation.items()}

    recommendation = {t: _pick_within(t, caps[t]).id for t in COMPONENT_TYPES}

    processor = get_component_details("processor", recommendation["processor"])
    socket = _socket_of(processor.name) if processor else ""
    if socket:
        compatible = sorted(
            (m for m in COMPONENT_PRICES["motherboard"] if socket in m.name),
            key=lambda m: m.price,
            reverse=True,
        )
        if compatible:
            affordable = [m for m in compatible if m.price <= caps["motherboard"]]
            recommendation["motherboard"] = (affordable[0] if affordable else compatible[-1]).id

    return recommendation


def _title(build_type: str) -> str:
    return build_type[:1].upper() + build_type[1:]


def get_recommended_builds(build_type: str, budget: int) -> list[BuildRecommendation]:
    """Return the base build plus performance- and value-leaning variants."""
    base = get_recommended_build(build_type, budget)
    label = _title(build_type)

    recommendations = [
        BuildRecommendation(
            name=f"Recommended {label} Build",
            description=f"Optimized {build_type} build within your budget with balanced performance",
            total_price=calculate_build_cost(base),
            components=dict(base),
        )
    ]

    performance = dict(base)
    current_cpu = get_component_price("processor", base["processor"])
    upgrades = sorted(
        (c for c in COMPONENT_PRICES["processor"] if current_cpu < c.price <= current_cpu * 1.3),
        key=lambda c: c.price,
    )
    if upgrades:
        performance["processor"] = upgrades[0].id
        current_case = get_component_price("pcCase", base["pcCase"])
        cheaper_cases = sorted(
            (c for c in COMPONENT_PRICES["pcCase"] if c.price < current_case),
            key=lambda c: c.price,
            reverse=True,
        )
        if cheaper_cases:
            performance["pcCase"] = cheaper_cases[0].id

    recommendations.append(
        BuildRecommendation(
            name=f"Performance {label} Build",
            description=f"Focused on maximum {build_type} performance with premium components",
            total_price=calculate_build_cost(performance),
            components=performance,
        )
    )

    value = dict(base)
    current_memory = get_component_price("memory", base["memory"])
    better_value = sorted(
        (c for c in COMPONENT_PRICES["memory"] if current_memory * 0.7 <= c.price < current_memory),
        key=lambda c: c.price,
        reverse=True,
    )
    if better_value:
        value["memory"] = better_value[0].id

    recommendations.append(
        BuildRecommendation(
            name=f"Value {label} Build",
            description="Great price-to-performance ratio with smart component choices",
            total_price=calculate_build_cost(value),
            components=value,
        )
    )
    return recommendations
