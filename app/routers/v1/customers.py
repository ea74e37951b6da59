"""Customer profile routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.pagination import PaginationParams
from app.core.response import DataResponse, ListResponse, paginated
from app.db.base import get_db
from app.schemas.customer import CustomerCreate, CustomerOut, CustomerUpdate
from app.schemas.order import OrderOut
from app.services.customer import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


def _svc(session: AsyncSession) -> CustomerService:
    return CustomerService(session, settings.default_client_id)


@router.get("", response_model=ListResponse[CustomerOut])
async def list_customers(
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    items, total = await _svc(session).list_customers(pagination)
    return paginated([CustomerOut.model_validate(c) for c in items], total, pagination)


@router.post("", response_model=DataResponse[CustomerOut], status_code=status.HTTP_201_CREATED)
async def create_customer(
    body: CustomerCreate,
    session: AsyncSession = Depends(get_db),
):
    customer = await _svc(session).create_customer(body)
    return {"data": CustomerOut.model_validate(customer)}


@router.get("/lookup", response_model=DataResponse[CustomerOut])
async def get_customer_by_email(
    email: str = Query(..., min_length=3),
    session: AsyncSession = Depends(get_db),
):
    customer = await _svc(session).get_by_email(email)
    return {"data": CustomerOut.model_validate(customer)}


@router.get("/orders", response_model=ListResponse[OrderOut])
async def list_customer_orders(
    email: str = Query(..., min_length=3),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    """Orders placed with the given email, newest first."""
    items, total = await _svc(session).orders_for_email(email, pagination)
    return paginated([OrderOut.model_validate(o) for o in items], total, pagination)


@router.get("/{customer_id}", response_model=DataResponse[CustomerOut])
async def get_customer(
    customer_id: str,
    session: AsyncSession = Depends(get_db),
):
    customer = await _svc(session).get_customer(customer_id)
    return {"data": CustomerOut.model_validate(customer)}


@router.put("/{customer_id}", response_model=DataResponse[CustomerOut])
async def update_customer(
    customer_id: str,
    body: CustomerUpdate,
    session: AsyncSession = Depends(get_db),
):
    customer = await _svc(session).update_customer(customer_id, body)
    return {"data": CustomerOut.model_validate(customer)}


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    session: AsyncSession = Depends(get_db),
):
    await _svc(session).delete_customer(customer_id)
