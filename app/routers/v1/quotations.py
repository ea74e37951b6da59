"""Admin quotation routes: review vendor quotations and accept or reject them."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.pagination import PaginationParams
from app.core.response import DataResponse, ListResponse, paginated
from app.db.base import get_db
from app.schemas.quotation import (
    ComponentQuoteOut,
    QuotationDecision,
    QuotationOut,
    VendorTotalsOut,
)
from app.services.notifications import EmailService, get_email_service
from app.services.quotation import QuotationService

router = APIRouter(prefix="/quotations", tags=["Quotations"])


def _svc(session: AsyncSession, mailer: EmailService | None = None) -> QuotationService:
    return QuotationService(session, settings.default_client_id, mailer)


@router.get("", response_model=ListResponse[QuotationOut])
async def list_quotations(
    filter_status: Optional[str] = Query(default=None, alias="status"),
    vendor_id: Optional[str] = Query(default=None, alias="vendorId"),
    order_id: Optional[str] = Query(default=None, alias="orderId"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    items, total = await _svc(session).list_quotations(
        pagination, status=filter_status, vendor_id=vendor_id, order_id=order_id,
    )
    return paginated([QuotationOut.model_validate(q) for q in items], total, pagination)


@router.get("/totals", response_model=DataResponse[list[VendorTotalsOut]])
async def vendor_quotation_totals(session: AsyncSession = Depends(get_db)):
    """Quotation count and accepted value per vendor."""
    totals = await _svc(session).vendor_quotation_totals()
    return {"data": [VendorTotalsOut.model_validate(t) for t in totals]}


@router.get(
    "/vendors/{vendor_id}/orders/{order_id}",
    response_model=DataResponse[list[ComponentQuoteOut]],
)
async def list_component_quotes(
    vendor_id: str,
    order_id: str,
    session: AsyncSession = Depends(get_db),
):
    quotes = await _svc(session).list_component_quotes(vendor_id, order_id)
    return {"data": [ComponentQuoteOut.model_validate(q) for q in quotes]}


@router.put(
    "/vendors/{vendor_id}/orders/{order_id}",
    response_model=DataResponse[QuotationOut],
)
async def decide_quotation(
    vendor_id: str,
    order_id: str,
    body: QuotationDecision,
    session: AsyncSession = Depends(get_db),
    mailer: EmailService = Depends(get_email_service),
):
    """Accept, reject or reset a vendor's quotation for an order."""
    quotation = await _svc(session, mailer).decide_quotation(vendor_id, order_id, body.status)
    return {"data": QuotationOut.model_validate(quotation)}
