"""Tracking-file and invoice schemas."""

from datetime import datetime

from app.schemas.common import CamelModel


class TrackingFileOut(CamelModel):
    id: str
    order_id: str
    file_name: str
    file_type: str
    file_url: str
    created_at: datetime
    updated_at: datetime


class InvoiceUrlOut(CamelModel):
    order_id: str
    url: str | None = None
