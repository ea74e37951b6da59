"""Customer profile schemas."""

from datetime import datetime

from app.schemas.common import CamelModel


class CustomerCreate(CamelModel):
    email: str
    full_name: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None


class CustomerUpdate(CamelModel):
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None


class CustomerOut(CamelModel):
    id: str
    email: str
    full_name: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    created_at: datetime
    updated_at: datetime
