"""Vendor routes: store profiles, win/loss stats, quoting on orders."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.pagination import PaginationParams
from app.core.response import DataResponse, ListResponse, paginated
from app.db.base import get_db
from app.schemas.quotation import ComponentQuotationOut, ComponentQuoteCreate, ComponentQuoteOut
from app.schemas.vendor import (
    StatIncrement,
    VendorCreate,
    VendorOrdersOut,
    VendorOut,
    VendorStatsOut,
    VendorUpdate,
)
from app.services.quotation import QuotationService
from app.services.vendor import VendorService

router = APIRouter(prefix="/vendors", tags=["Vendors"])


def _svc(session: AsyncSession) -> VendorService:
    return VendorService(session, settings.default_client_id)


def _quotes(session: AsyncSession) -> QuotationService:
    return QuotationService(session, settings.default_client_id)


# ------------------------------------------------------------------
# Profiles
# ------------------------------------------------------------------

@router.get("", response_model=ListResponse[VendorOut])
async def list_vendors(
    filter_status: Optional[str] = Query(default=None, alias="status", description="Filter by status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    """List vendors, by vendor name unless ?sort= is given."""
    items, total = await _svc(session).list_vendors(pagination, status=filter_status)
    return paginated([VendorOut.model_validate(v) for v in items], total, pagination)


@router.post("", response_model=DataResponse[VendorOut], status_code=status.HTTP_201_CREATED)
async def create_vendor(
    body: VendorCreate,
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(session).create_vendor(body)
    return {"data": VendorOut.model_validate(vendor)}


@router.get("/{vendor_id}", response_model=DataResponse[VendorOut])
async def get_vendor(
    vendor_id: str,
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(session).get_vendor(vendor_id)
    return {"data": VendorOut.model_validate(vendor)}


@router.put("/{vendor_id}", response_model=DataResponse[VendorOut])
async def update_vendor(
    vendor_id: str,
    body: VendorUpdate,
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(session).update_vendor(vendor_id, body)
    return {"data": VendorOut.model_validate(vendor)}


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor(
    vendor_id: str,
    session: AsyncSession = Depends(get_db),
):
    await _svc(session).delete_vendor(vendor_id)


# ------------------------------------------------------------------
# Stats and processed orders
# ------------------------------------------------------------------

@router.get("/{vendor_id}/stats", response_model=DataResponse[VendorStatsOut])
async def get_vendor_stats(
    vendor_id: str,
    session: AsyncSession = Depends(get_db),
):
    stats = await _svc(session).get_stats(vendor_id)
    return {"data": VendorStatsOut.model_validate(stats)}


@router.post("/{vendor_id}/stats", response_model=DataResponse[VendorStatsOut])
async def increment_vendor_stat(
    vendor_id: str,
    body: StatIncrement,
    session: AsyncSession = Depends(get_db),
):
    stats = await _svc(session).increment_stat(vendor_id, body.field)
    return {"data": VendorStatsOut.model_validate(stats)}


@router.get("/{vendor_id}/orders", response_model=DataResponse[VendorOrdersOut])
async def get_vendor_orders(
    vendor_id: str,
    session: AsyncSession = Depends(get_db),
):
    svc = _svc(session)
    processed = await svc.processed_order_ids(vendor_id)
    count = await svc.count_vendor_orders(vendor_id)
    return {"data": VendorOrdersOut(vendor_id=vendor_id, processed_order_ids=processed, order_count=count)}


# ------------------------------------------------------------------
# Quoting
# ------------------------------------------------------------------

@router.get(
    "/{vendor_id}/orders/{order_id}/quotations",
    response_model=DataResponse[list[ComponentQuotationOut]],
)
async def get_component_quotations(
    vendor_id: str,
    order_id: str,
    session: AsyncSession = Depends(get_db),
):
    """Order lines with this vendor's quoted prices."""
    rows = await _quotes(session).get_component_quotations(vendor_id, order_id)
    return {"data": [ComponentQuotationOut.model_validate(r) for r in rows]}


@router.post(
    "/{vendor_id}/orders/{order_id}/quotations",
    response_model=DataResponse[ComponentQuoteOut],
    status_code=status.HTTP_201_CREATED,
)
async def submit_component_quote(
    vendor_id: str,
    order_id: str,
    body: ComponentQuoteCreate,
    session: AsyncSession = Depends(get_db),
):
    quote = await _quotes(session).submit_component_quote(
        vendor_id,
        order_id,
        body.order_item_id,
        body.quoted_price,
        component_name=body.component_name,
        quantity=body.quantity,
    )
    return {"data": ComponentQuoteOut.model_validate(quote)}
