"""Checkout: create the order, issue its invoice, email the confirmation.

Only order creation can fail the request. A storage or mail problem is logged
and reported back in the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError
from app.domain.order import Order
from app.schemas.order import OrderCreate
from app.services.invoice import InvoiceService
from app.services.notifications import EmailService
from app.services.order import OrderService
from app.services.storage import LocalBucketStorage

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    order: Order
    invoice_url: str | None = None
    confirmation_sent: bool = False


class CheckoutService:
    def __init__(
        self,
        session: AsyncSession,
        client_id: str,
        storage: LocalBucketStorage,
        mailer: EmailService | None = None,
    ):
        self._orders = OrderService(session, client_id)
        self._invoices = InvoiceService(session, client_id, storage)
        self._mailer = mailer

    async def place_order(self, data: OrderCreate) -> CheckoutResult:
        order = await self._orders.create_order(data)
        result = CheckoutResult(order=order)

        try:
            invoice = await self._invoices.generate_invoice(order.id)
            result.invoice_url = invoice.file_url
        except StorageError as exc:
            logger.warning("Invoice for order %s not stored: %s", order.id, exc.message)
        except RuntimeError as exc:
            # PyMuPDF reports document failures as RuntimeError subclasses
            logger.error("Invoice for order %s could not be rendered: %s", order.id, exc)

        if self._mailer:
            result.confirmation_sent = await self._mailer.send_order_confirmation(
                order.customer_email,
                order.customer_name,
                order.tracking_id,
                order.build_type,
                order.grand_total,
                result.invoice_url,
            )
        return result

    async def resend_confirmation(self, order_id: str) -> bool:
        order = await self._orders.get_order(order_id)
        if not self._mailer:
            return False
        url = await self._invoices.get_invoice_url(order_id)
        return await self._mailer.send_order_confirmation(
            order.customer_email,
            order.customer_name,
            order.tracking_id,
            order.build_type,
            order.grand_total,
            url,
        )
