"""Customer profile service."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.pagination import PaginationParams
from app.domain.customer import CustomerProfile
from app.repositories.customer import CustomerRepository
from app.repositories.order import OrderRepository
from app.schemas.customer import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class CustomerService:
    def __init__(self, session: AsyncSession, client_id: str):
        self._repo = CustomerRepository(session, client_id)
        self._orders = OrderRepository(session, client_id)

    async def list_customers(self, pagination: PaginationParams):
        return await self._repo.list(**pagination.list_kwargs())

    async def get_customer(self, customer_id: str) -> CustomerProfile:
        customer = await self._repo.get_by_id(customer_id)
        if not customer:
            raise NotFoundError("Customer", customer_id)
        return customer

    async def get_by_email(self, email: str) -> CustomerProfile:
        customer = await self._repo.get_by_email(email)
        if not customer:
            raise NotFoundError("Customer", normalize_email(email))
        return customer

    async def create_customer(self, data: CustomerCreate) -> CustomerProfile:
        email = normalize_email(data.email)
        if "@" not in email:
            raise ValidationError("A valid email address is required")
        if await self._repo.get_by_email(email):
            raise ConflictError(f"Customer with email '{email}' already exists")

        payload = data.model_dump(exclude_none=True)
        payload["email"] = email
        customer = await self._repo.create(**payload)
        logger.info("Created customer profile %s", customer.id)
        return customer

    async def update_customer(self, customer_id: str, data: CustomerUpdate) -> CustomerProfile:
        current = await self.get_customer(customer_id)
        payload = data.model_dump(exclude_none=True, exclude_unset=True)
        if "email" in payload:
            payload["email"] = normalize_email(payload["email"])
            if payload["email"] != current.email:
                existing = await self._repo.get_by_email(payload["email"])
                if existing and existing.id != customer_id:
                    raise ConflictError(f"Customer with email '{payload['email']}' already exists")
        return await self._repo.update(customer_id, **payload)  # type: ignore[return-value]

    async def delete_customer(self, customer_id: str) -> None:
        if not await self._repo.soft_delete(customer_id):
            raise NotFoundError("Customer", customer_id)

    async def orders_for_email(self, email: str, pagination: PaginationParams):
        """A customer's orders, newest first, matched on the checkout email."""
        return await self._orders.list(
            **pagination.list_kwargs(sort="order_date"),
            filters={"customer_email": normalize_email(email)},
        )
