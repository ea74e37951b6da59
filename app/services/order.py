"""Order service: checkout persistence, order lines, status changes, tracking lookup.

Rule: No FastAPI here. Pricing comes from the catalog, never from the client.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.pagination import PaginationParams
from app.domain.mixins import utcnow
from app.domain.order import Order, OrderUpdate
from app.repositories.catalog import ComponentRepository
from app.repositories.customer import CustomerRepository
from app.repositories.order import (
    OrderedComponentRepository,
    OrderItemRepository,
    OrderRepository,
    OrderUpdateRepository,
)
from app.repositories.tracking import TrackingFileRepository
from app.schemas.order import OrderCreate
from app.services.catalog import (
    COMPONENT_TYPES,
    StorageOption,
    get_component_details,
    resolve_storage_options,
)
from app.services.charges import quote_order
from app.services.customer import normalize_email
from app.services.tracking import (
    OrderStatus,
    default_status_message,
    generate_tracking_code,
    status_label,
)

logger = logging.getLogger(__name__)

DETAIL_FIELDS = (
    "brand", "model", "cores", "clock_speed", "memory",
    "capacity", "speed", "type", "form_factor", "vram",
)
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE,
)
_TRACKING_CODE_ATTEMPTS = 5
EXTRA_STORAGE_CATEGORY = "extra_storage"


def is_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def _first(source: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if source.get(key):
            return source[key]
    return None


def normalize_component(component: Mapping[str, Any]) -> dict[str, Any]:
    """Turn a loosely-shaped component record into ``customer_ordered_components`` columns.

    Name, category, id and price are accepted under any of the aliases the
    build wizard has used over time. Hardware details found at the top level win
    over the same fields inside ``component_details``. Ids that are not UUIDs
    are kept as ``reference_id`` in the details.

    Raises ``ValueError`` when price or quantity is not a usable number.
    """
    original_name = _first(component, "original_name", "name", "model_name", "component_name")
    category = _first(component, "category", "component_category", "component_type")

    details: dict[str, Any] = {
        "name": original_name or "Unknown Component",
        "category": category or "Unknown Category",
        "description": component.get("description") or original_name or "Component",
        "original_name": original_name,
    }
    for key in DETAIL_FIELDS:
        if component.get(key):
            details[key] = component[key]

    nested = component.get("component_details")
    if isinstance(nested, Mapping):
        for key in (*DETAIL_FIELDS, "original_name"):
            if nested.get(key) and not details.get(key):
                details[key] = nested[key]

    component_id = _first(component, "id", "component_id")
    if component_id and not is_uuid(component_id):
        details["reference_id"] = component_id
        component_id = None

    try:
        unit_price = Decimal(str(_first(component, "price", "unit_price") or 0))
        quantity = int(component.get("quantity") or 1)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Unusable price or quantity: {exc}") from exc
    if not unit_price.is_finite():
        raise ValueError("Price must be a finite number")
    if unit_price < 0 or quantity < 1:
        raise ValueError("Price must be >= 0 and quantity >= 1")

    return {
        "component_name": original_name or details["name"],
        "component_id": component_id,
        "component_category": details["category"],
        "component_details": details,
        "quantity": quantity,
        "unit_price": unit_price,
        "total_price": unit_price * quantity,
    }


@dataclass
class OrderLine:
    """One line of an order, whichever table it was read from."""

    id: str
    order_id: str
    component_name: str
    component_id: str | None
    component_category: str | None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    component_details: dict[str, Any] = field(default_factory=dict)


class OrderService:
    def __init__(self, session: AsyncSession, client_id: str):
        self._orders = OrderRepository(session, client_id)
        self._components = OrderedComponentRepository(session, client_id)
        self._items = OrderItemRepository(session, client_id)
        self._updates = OrderUpdateRepository(session, client_id)
        self._files = TrackingFileRepository(session, client_id)
        self._customers = CustomerRepository(session, client_id)
        self._catalog = ComponentRepository(session, client_id)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def list_orders(
        self,
        pagination: PaginationParams,
        status: str | None = None,
        customer_email: str | None = None,
    ):
        filters = {
            "status": status,
            "customer_email": normalize_email(customer_email) if customer_email else None,
        }
        return await self._orders.list(**pagination.list_kwargs(sort="order_date"), filters=filters)

    async def get_order(self, order_id: str) -> Order:
        order = await self._orders.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    async def get_order_by_tracking_id(self, tracking_id: str) -> Order:
        order = await self._orders.get_by_tracking_id(tracking_id.strip().upper())
        if not order:
            raise NotFoundError("Order", tracking_id)
        return order

    async def list_updates(self, order_id: str) -> list[OrderUpdate]:
        await self.get_order(order_id)
        return await self._updates.for_order(order_id)

    async def fetch_order_items(self, order_id: str) -> list[OrderLine]:
        """Customer-ordered components, or legacy ``order_items`` rows when there are none."""
        if not order_id or not order_id.strip():
            return []

        components = await self._components.for_order(order_id)
        if components:
            return [
                OrderLine(
                    id=c.id,
                    order_id=c.order_id,
                    component_name=c.component_name,
                    component_id=c.component_id,
                    component_category=c.component_category,
                    quantity=c.quantity or 1,
                    unit_price=c.unit_price,
                    total_price=c.total_price,
                    component_details=dict(c.component_details or {}),
                )
                for c in components
            ]

        items = await self._items.for_order(order_id)
        if not items:
            logger.debug("No order lines found for order %s", order_id)
        return [
            OrderLine(
                id=i.id,
                order_id=i.order_id,
                component_name=i.component_name,
                component_id=i.component_id,
                component_category=None,
                quantity=i.quantity or 1,
                unit_price=i.price_at_time,
                total_price=(i.price_at_time or Decimal(0)) * (i.quantity or 1),
                component_details={
                    "name": i.component_name,
                    "category": "Component",
                    "description": i.component_name,
                },
            )
            for i in items
        ]

    async def track(self, tracking_id: str) -> dict[str, Any]:
        """Public tracking summary: order headline, component names, history oldest first."""
        order = await self.get_order_by_tracking_id(tracking_id)
        lines = await self.fetch_order_items(order.id)
        updates = await self._updates.for_order(order.id)
        return {
            "tracking_id": order.tracking_id,
            "status": order.status,
            "status_label": status_label(order.status),
            "customer_name": order.customer_name,
            "build_type": order.build_type,
            "order_date": order.order_date,
            "estimated_delivery": order.estimated_delivery,
            "grand_total": order.grand_total,
            "components": [line.component_name for line in lines],
            "updates": [
                {
                    "status": u.status,
                    "status_label": status_label(u.status),
                    "message": u.message,
                    "update_date": u.update_date,
                }
                for u in updates
            ],
        }

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def _new_tracking_id(self) -> str:
        for _ in range(_TRACKING_CODE_ATTEMPTS):
            code = generate_tracking_code()
            if not await self._orders.tracking_id_exists(code):
                return code
        raise ConflictError("Could not allocate a unique tracking id")

    @staticmethod
    def _resolve_selection(
        selection: Mapping[str, str], extra_storage: list[str],
    ) -> tuple[dict[str, str], list[StorageOption]]:
        unknown_types = sorted(t for t in selection if t not in COMPONENT_TYPES)
        if unknown_types:
            raise ValidationError(f"Unknown component type(s): {', '.join(unknown_types)}")

        chosen = {t: cid for t, cid in selection.items() if cid}
        if not chosen:
            raise ValidationError("At least one component must be selected")
        for component_type, component_id in chosen.items():
            if get_component_details(component_type, component_id) is None:
                raise ValidationError(f"Unknown {component_type} '{component_id}'")

        return chosen, resolve_storage_options(extra_storage)

    async def create_order(self, data: OrderCreate) -> Order:
        selection, extras = self._resolve_selection(data.components, data.extra_storage)
        pricing = quote_order(selection, extras)

        email = normalize_email(data.customer_email)
        customer = await self._customers.get_by_email(email)
        now = utcnow()

        order = await self._orders.create(
            tracking_id=await self._new_tracking_id(),
            customer_id=customer.id if customer else None,
            customer_name=data.customer_name.strip(),
            customer_email=email,
            customer_phone=data.customer_phone,
            address=data.address,
            city=data.city,
            state=data.state,
            zipcode=data.zipcode,
            build_type=data.build_type,
            build_cost=pricing.build_cost,
            build_charge=pricing.build_charge,
            shipping_charge=pricing.delivery_charge,
            gst_amount=pricing.gst,
            grand_total=pricing.total,
            weight_kg=Decimal(str(pricing.weight)),
            status=OrderStatus.ORDER_RECEIVED.value,
            order_date=now,
            estimated_delivery=now + timedelta(days=settings.estimated_delivery_days),
        )

        lines: list[dict[str, Any]] = []
        for component_type in COMPONENT_TYPES:
            item = get_component_details(component_type, selection.get(component_type, ""))
            if item:
                lines.append(
                    {"id": item.id, "name": item.name, "category": component_type, "price": item.price}
                )
        for option in extras:
            lines.append(
                {
                    "id": option.id,
                    "name": option.name,
                    "category": EXTRA_STORAGE_CATEGORY,
                    "price": option.price,
                    "type": option.type,
                    "description": "Additional storage",
                }
            )
        await self.store_customer_ordered_components(order.id, lines)

        await self._updates.create(
            order_id=order.id,
            status=order.status,
            message=default_status_message(order.status),
            update_date=now,
        )
        logger.info(
            "Order %s created (tracking %s, total %s)", order.id, order.tracking_id, pricing.total,
        )
        return order

    async def store_customer_ordered_components(
        self, order_id: str, components: list[Mapping[str, Any]],
    ) -> tuple[int, int]:
        """Persist component records for an order. Returns ``(stored, failed)``."""
        if not order_id or not order_id.strip():
            raise ValidationError("Invalid order ID")
        if not components:
            raise ValidationError("No components provided")
        await self.get_order(order_id)

        stored = failed = 0
        for component in components:
            try:
                row = normalize_component(component)
            except ValueError as exc:
                logger.warning("Skipping component for order %s: %s", order_id, exc)
                failed += 1
                continue

            # Only link rows that exist in the components table
            if row["component_id"] and not await self._catalog.get_by_id(row["component_id"]):
                row["component_details"]["reference_id"] = row["component_id"]
                row["component_id"] = None

            await self._components.create(order_id=order_id, **row)
            stored += 1

        if failed:
            logger.warning(
                "Stored %d/%d components for order %s", stored, len(components), order_id,
            )
        else:
            logger.info("Stored %d components for order %s", stored, order_id)
        return stored, failed

    async def update_order_status(
        self, order_id: str, status: str, message: str | None = None,
    ) -> Order:
        """Move an order to *status*, log the change, and touch its tracking marker."""
        valid = {s.value for s in OrderStatus}
        if status not in valid:
            raise ValidationError(f"Invalid order status '{status}'")
        order = await self.get_order(order_id)

        updated = await self._orders.update(order_id, status=status)
        await self._updates.create(
            order_id=order_id,
            status=status,
            message=message or default_status_message(status),
            update_date=utcnow(),
        )

        marker = await self._files.latest_of_type(order_id, "tracking")
        if marker:
            await self._files.update(marker.id)
        else:
            await self._files.create(
                order_id=order_id,
                file_name=f"tracking_{order.tracking_id}",
                file_type="tracking",
                file_url="",
            )

        logger.info("Order %s status -> %s", order_id, status)
        return updated  # type: ignore[return-value]

    async def delete_order(self, order_id: str) -> None:
        if not await self._orders.soft_delete(order_id):
            raise NotFoundError("Order", order_id)
