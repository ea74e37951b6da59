"""Order repositories: orders, ordered components, legacy items, status history."""

from __future__ import annotations

from app.domain.order import CustomerOrderedComponent, Order, OrderItem, OrderUpdate
from app.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    model = Order

    async def get_by_tracking_id(self, tracking_id: str) -> Order | None:
        return await self.first_by(tracking_id=tracking_id)

    async def tracking_id_exists(self, tracking_id: str) -> bool:
        return await self.get_by_tracking_id(tracking_id) is not None


class OrderedComponentRepository(BaseRepository[CustomerOrderedComponent]):
    model = CustomerOrderedComponent

    async def for_order(self, order_id: str) -> list[CustomerOrderedComponent]:
        return await self.all_by(order_id=order_id)


class OrderItemRepository(BaseRepository[OrderItem]):
    model = OrderItem

    async def for_order(self, order_id: str) -> list[OrderItem]:
        return await self.all_by(order_id=order_id)


class OrderUpdateRepository(BaseRepository[OrderUpdate]):
    model = OrderUpdate

    async def for_order(self, order_id: str) -> list[OrderUpdate]:
        """Status history, oldest first."""
        return await self.all_by(order_by="update_date", order_id=order_id)
