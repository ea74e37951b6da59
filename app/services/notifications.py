"""Transactional email through the Resend HTTP API.

Mail is best-effort: every public method returns ``True``/``False`` and logs
failures instead of raising, so an order or quotation decision never fails
because the mail provider is down.
"""

from __future__ import annotations

import base64
import logging
import re
from datetime import datetime
from decimal import Decimal
from html import escape
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import EmailDeliveryError
from app.domain.mixins import utcnow
from app.services.tracking import format_currency

logger = logging.getLogger(__name__)

_LEGACY_BRAND_RE = re.compile(r"NexusBuild|Nexus Build", re.IGNORECASE)

_STYLE = """
  body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
  .container { max-width: 600px; margin: 0 auto; padding: 20px; }
  .header { background-color: #8B5CF6; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0; }
  .content { padding: 20px; background-color: #f9fafb; border-left: 1px solid #e5e7eb; border-right: 1px solid #e5e7eb; }
  .footer { padding: 20px; text-align: center; font-size: 12px; color: #6b7280; background-color: #f3f4f6; border-radius: 0 0 8px 8px; }
  .button { background-color: #8B5CF6; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block; font-weight: bold; margin: 20px 0; }
  .info-box { background-color: #f0f9ff; border: 1px solid #bae6fd; border-radius: 6px; padding: 15px; margin-top: 20px; }
  .logo { font-size: 28px; font-weight: bold; }
"""


def _layout(body: str, year: int) -> str:
    return f"""<html>
  <head><style>{_STYLE}</style></head>
  <body>
    <div class="container">
      <div class="header">
        <div class="logo">Assemblie</div>
        <p>Custom PC Solutions</p>
      </div>
      <div class="content">
{body}
      </div>
      <div class="footer">
        <p>&copy; {year} Assemblie. All rights reserved.</p>
        <p>This is an automated email, please do not reply.</p>
      </div>
    </div>
  </body>
</html>"""


def order_confirmation_html(
    customer_name: str,
    tracking_id: str,
    build_type: str | None,
    total: Decimal | int | None,
    ordered_at: datetime | None = None,
) -> str:
    ordered_at = ordered_at or utcnow()
    total_text = format_currency(total) if total is not None else "N/A"
    track_url = f"{settings.tracking_page_url}?id={tracking_id}"
    body = f"""        <h2>Thank You for Your Order!</h2>
        <p>Dear {escape(customer_name)},</p>
        <p>We're thrilled to confirm that your order has been received and is being processed by our team of experts.</p>
        <div class="info-box">
          <h3>Order Details:</h3>
          <p><strong>Order ID:</strong> {escape(tracking_id)}</p>
          <p><strong>Order Date:</strong> {ordered_at:%B} {ordered_at.day}, {ordered_at.year}</p>
          <p><strong>Build Type:</strong> {escape(build_type or 'Custom PC')}</p>
          <p><strong>Total Amount:</strong> {total_text}</p>
        </div>
        <p>Your invoice has been attached to this email for your records.</p>
        <center><a href="{escape(track_url)}" class="button">Track Your Order</a></center>
        <p>If you have any questions about your order, contact us at <a href="mailto:support@assemblie.in">support@assemblie.in</a>.</p>
        <p>Best regards,<br>The Assemblie Team</p>"""
    return _layout(body, ordered_at.year)


def quotation_decision_html(
    store_name: str, tracking_id: str, status: str, amount: Decimal | int,
) -> str:
    if status == "accepted":
        headline = "Your quotation has been accepted"
        detail = "Please begin sourcing the quoted components. Our team will be in touch with delivery details."
    else:
        headline = "Your quotation was not selected"
        detail = "Thank you for quoting. We look forward to working with you on future orders."
    body = f"""        <h2>{headline}</h2>
        <p>Hello {escape(store_name)},</p>
        <div class="info-box">
          <p><strong>Order:</strong> {escape(tracking_id)}</p>
          <p><strong>Quoted Total:</strong> {format_currency(amount)}</p>
          <p><strong>Status:</strong> {status.title()}</p>
        </div>
        <p>{detail}</p>
        <p>Best regards,<br>The Assemblie Team</p>"""
    return _layout(body, utcnow().year)


class EmailService:
    """Thin async wrapper around the Resend ``/emails`` endpoint."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client or httpx.AsyncClient(timeout=settings.email_timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _fetch_attachment(self, url: str) -> Optional[bytes]:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            logger.error("Error fetching attachment %s: %s", url, exc)
            return None
        if response.status_code != 200:
            logger.error("Failed to fetch attachment %s, status: %d", url, response.status_code)
            return None
        if not response.content:
            logger.error("Attachment at %s was empty (0 bytes)", url)
            return None
        return response.content

    async def _deliver(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(
                settings.resend_api_url,
                headers={"Authorization": f"Bearer {settings.resend_api_key}"},
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise EmailDeliveryError(
                f"Mail provider returned {exc.response.status_code}: {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Mail provider unreachable: {exc}") from exc
        return response.json()

    async def send_email(
        self, to: str, subject: str, html: str, attachment_url: str | None = None,
    ) -> bool:
        if not to or not subject or not html:
            logger.warning("Not sending email: recipient, subject and body are required")
            return False
        if not settings.email_enabled:
            logger.info("Email disabled (no RESEND_API_KEY); skipping '%s' to %s", subject, to)
            return False

        payload: Dict[str, Any] = {
            "from": settings.email_from,
            "to": [to],
            "subject": _LEGACY_BRAND_RE.sub("Assemblie", subject),
            "html": _LEGACY_BRAND_RE.sub("Assemblie", html),
        }
        if attachment_url:
            content = await self._fetch_attachment(attachment_url)
            if content:
                payload["attachments"] = [
                    {"filename": "invoice.pdf", "content": base64.b64encode(content).decode("ascii")}
                ]

        try:
            data = await self._deliver(payload)
        except EmailDeliveryError as exc:
            logger.error("Failed to send '%s' to %s: %s", subject, to, exc.message)
            return False
        logger.info(
            "Email '%s' sent to %s (id=%s, attachment=%s)",
            subject, to, data.get("id"), "attachments" in payload,
        )
        return True

    async def send_order_confirmation(
        self,
        to: str,
        customer_name: str,
        tracking_id: str,
        build_type: str | None,
        total: Decimal | int | None,
        invoice_url: str | None = None,
    ) -> bool:
        subject = f"Your Order Confirmation #{tracking_id} - Assemblie"
        html = order_confirmation_html(customer_name, tracking_id, build_type, total)
        return await self.send_email(to, subject, html, invoice_url)

    async def send_quotation_decision(
        self, to: str, store_name: str, tracking_id: str, status: str, amount: Decimal | int,
    ) -> bool:
        subject = f"Quotation {status.title()} for Order #{tracking_id} - Assemblie"
        html = quotation_decision_html(store_name, tracking_id, status, amount)
        return await self.send_email(to, subject, html)


async def get_email_service():
    """FastAPI dependency yielding an EmailService whose client is closed after the request."""
    service = EmailService()
    try:
        yield service
    finally:
        await service.aclose()
