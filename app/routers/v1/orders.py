"""Order routes: checkout, admin order management, order lines, invoices."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.pagination import PaginationParams
from app.core.response import DataResponse, ListResponse, paginated
from app.db.base import get_db
from app.schemas.order import (
    CheckoutOut,
    ComponentsIn,
    OrderCreate,
    OrderItemOut,
    OrderOut,
    OrderUpdateOut,
    StatusUpdate,
    StoredComponentsOut,
)
from app.schemas.tracking import InvoiceUrlOut, TrackingFileOut
from app.services.checkout import CheckoutService
from app.services.invoice import InvoiceService
from app.services.notifications import EmailService, get_email_service
from app.services.order import OrderService
from app.services.storage import LocalBucketStorage, get_storage

router = APIRouter(prefix="/orders", tags=["Orders"])


def _svc(session: AsyncSession) -> OrderService:
    return OrderService(session, settings.default_client_id)


def _invoices(session: AsyncSession, storage: LocalBucketStorage) -> InvoiceService:
    return InvoiceService(session, settings.default_client_id, storage)


# ------------------------------------------------------------------
# Checkout
# ------------------------------------------------------------------

@router.post("", response_model=DataResponse[CheckoutOut], status_code=status.HTTP_201_CREATED)
async def place_order(
    body: OrderCreate,
    session: AsyncSession = Depends(get_db),
    storage: LocalBucketStorage = Depends(get_storage),
    mailer: EmailService = Depends(get_email_service),
):
    """Price the build, create the order, store its invoice and email the customer."""
    checkout = CheckoutService(session, settings.default_client_id, storage, mailer)
    result = await checkout.place_order(body)
    return {
        "data": CheckoutOut(
            order=OrderOut.model_validate(result.order),
            invoice_url=result.invoice_url,
            confirmation_sent=result.confirmation_sent,
        )
    }


# ------------------------------------------------------------------
# Orders
# ------------------------------------------------------------------

@router.get("", response_model=ListResponse[OrderOut])
async def list_orders(
    filter_status: Optional[str] = Query(default=None, alias="status"),
    customer_email: Optional[str] = Query(default=None, alias="email"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    items, total = await _svc(session).list_orders(
        pagination, status=filter_status, customer_email=customer_email,
    )
    return paginated([OrderOut.model_validate(o) for o in items], total, pagination)


@router.get("/by-tracking/{tracking_id}", response_model=DataResponse[OrderOut])
async def get_order_by_tracking_id(
    tracking_id: str,
    session: AsyncSession = Depends(get_db),
):
    order = await _svc(session).get_order_by_tracking_id(tracking_id)
    return {"data": OrderOut.model_validate(order)}


@router.get("/{order_id}", response_model=DataResponse[OrderOut])
async def get_order(
    order_id: str,
    session: AsyncSession = Depends(get_db),
):
    order = await _svc(session).get_order(order_id)
    return {"data": OrderOut.model_validate(order)}


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: str,
    session: AsyncSession = Depends(get_db),
):
    await _svc(session).delete_order(order_id)


@router.put("/{order_id}/status", response_model=DataResponse[OrderOut])
async def update_order_status(
    order_id: str,
    body: StatusUpdate,
    session: AsyncSession = Depends(get_db),
):
    order = await _svc(session).update_order_status(order_id, body.status, body.message)
    return {"data": OrderOut.model_validate(order)}


@router.get("/{order_id}/updates", response_model=DataResponse[list[OrderUpdateOut]])
async def list_order_updates(
    order_id: str,
    session: AsyncSession = Depends(get_db),
):
    updates = await _svc(session).list_updates(order_id)
    return {"data": [OrderUpdateOut.model_validate(u) for u in updates]}


# ------------------------------------------------------------------
# Order lines
# ------------------------------------------------------------------

@router.get("/{order_id}/items", response_model=DataResponse[list[OrderItemOut]])
async def list_order_items(
    order_id: str,
    session: AsyncSession = Depends(get_db),
):
    svc = _svc(session)
    await svc.get_order(order_id)
    lines = await svc.fetch_order_items(order_id)
    return {"data": [OrderItemOut.model_validate(line) for line in lines]}


@router.post(
    "/{order_id}/components",
    response_model=DataResponse[StoredComponentsOut],
    status_code=status.HTTP_201_CREATED,
)
async def store_components(
    order_id: str,
    body: ComponentsIn,
    session: AsyncSession = Depends(get_db),
):
    stored, failed = await _svc(session).store_customer_ordered_components(order_id, body.components)
    return {"data": StoredComponentsOut(stored=stored, failed=failed)}


# ------------------------------------------------------------------
# Files and invoices
# ------------------------------------------------------------------

@router.get("/{order_id}/files", response_model=DataResponse[list[TrackingFileOut]])
async def list_order_files(
    order_id: str,
    session: AsyncSession = Depends(get_db),
    storage: LocalBucketStorage = Depends(get_storage),
):
    files = await _invoices(session, storage).list_files(order_id)
    return {"data": [TrackingFileOut.model_validate(f) for f in files]}


@router.get("/{order_id}/invoice", response_model=DataResponse[InvoiceUrlOut])
async def get_invoice_url(
    order_id: str,
    session: AsyncSession = Depends(get_db),
    storage: LocalBucketStorage = Depends(get_storage),
):
    url = await _invoices(session, storage).get_invoice_url(order_id)
    return {"data": InvoiceUrlOut(order_id=order_id, url=url)}


@router.post(
    "/{order_id}/invoice",
    response_model=DataResponse[TrackingFileOut],
    status_code=status.HTTP_201_CREATED,
)
async def regenerate_invoice(
    order_id: str,
    session: AsyncSession = Depends(get_db),
    storage: LocalBucketStorage = Depends(get_storage),
):
    record = await _invoices(session, storage).generate_invoice(order_id)
    return {"data": TrackingFileOut.model_validate(record)}


@router.get("/{order_id}/invoice/download")
async def download_invoice(
    order_id: str,
    session: AsyncSession = Depends(get_db),
    storage: LocalBucketStorage = Depends(get_storage),
):
    file_name, path = await _invoices(session, storage).download_invoice(order_id)
    return FileResponse(path, media_type="application/pdf", filename=file_name)


@router.post("/{order_id}/confirmation", response_model=DataResponse[dict])
async def resend_confirmation(
    order_id: str,
    session: AsyncSession = Depends(get_db),
    storage: LocalBucketStorage = Depends(get_storage),
    mailer: EmailService = Depends(get_email_service),
):
    checkout = CheckoutService(session, settings.default_client_id, storage, mailer)
    sent = await checkout.resend_confirmation(order_id)
    return {"data": {"sent": sent}}
