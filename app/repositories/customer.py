"""Customer profile repository."""

from __future__ import annotations

from app.domain.customer import CustomerProfile
from app.repositories.base import BaseRepository


class CustomerRepository(BaseRepository[CustomerProfile]):
    model = CustomerProfile

    async def get_by_email(self, email: str) -> CustomerProfile | None:
        return await self.first_by(email=email.strip().lower())
