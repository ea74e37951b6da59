import re
from datetime import datetime

import fitz
import pytest

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.order import OrderCreate
from app.services.checkout import CheckoutService
from app.services.invoice import (
    InvoiceService,
    _table_rows,
    generate_invoice_number,
    invoice_key,
    pricing_of,
    render_invoice,
)
from app.services.order import OrderService
from app.services.storage import LocalBucketStorage, get_storage

from tests.conftest import CLIENT_ID


@pytest.fixture
def storage(storage_root):
    return get_storage()


@pytest.fixture
def invoices(session, storage):
    return InvoiceService(session, CLIENT_ID, storage)


@pytest.fixture
async def order(session, gaming_selection):
    return await OrderService(session, CLIENT_ID).create_order(
        OrderCreate(
            customer_name="Asha Verma",
            customer_email="asha@example.com",
            address="12 MG Road",
            city="Bengaluru",
            build_type="gaming",
            components=gaming_selection,
            extra_storage=["crucial-1tb"],
        )
    )


def _pdf_text(pdf: bytes) -> str:
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        return "".join(page.get_text() for page in doc)


def test_invoice_number_format():
    assert re.fullmatch(r"ASB-\d{4}-2025", generate_invoice_number(datetime(2025, 6, 1)))


async def test_table_rows_order(session, order):
    lines = await OrderService(session, CLIENT_ID).fetch_order_items(order.id)
    rows = _table_rows(lines, pricing_of(order))

    labels = [row[0] for row in rows]
    assert labels[-3:] == ["Build Charge", "Delivery", "Storage (Additional)"]
    assert "CPU" in labels[:8]
    assert rows[-2][3] == "2,000"


async def test_render_invoice(session, order):
    lines = await OrderService(session, CLIENT_ID).fetch_order_items(order.id)
    pdf = render_invoice(
        order, lines, pricing_of(order),
        invoice_number="ASB-1234-2025", issued_at=datetime(2025, 6, 1),
    )

    assert pdf.startswith(b"%PDF")
    text = _pdf_text(pdf)
    assert "INVOICE #ASB-1234-2025" in text
    assert "DATE: 1/6/2025" in text
    assert "Name: Asha Verma" in text
    assert "GAMING PC BUILD" in text
    assert "Crucial 1TB SSD" in text
    assert "1,15,241" in text  # 90662 + 5000 + 2000 + 17579


async def test_generate_and_lookup(invoices, order, storage_root):
    record = await invoices.generate_invoice(order.id)

    key = invoice_key(order.id)
    assert (storage_root / settings.invoices_bucket / key).read_bytes().startswith(b"%PDF")
    assert record.file_type == "invoice"
    assert record.file_url == f"{settings.public_files_url}/invoices/{key}"
    assert await invoices.get_invoice_url(order.id) == record.file_url


async def test_regenerating_keeps_one_invoice_row(invoices, order):
    await invoices.generate_invoice(order.id)
    await invoices.generate_invoice(order.id)

    files = await invoices.list_files(order.id)
    assert [f.file_type for f in files] == ["invoice"]


async def test_invoice_found_in_bucket_without_a_row(invoices, storage, order):
    assert await invoices.get_invoice_url(order.id) is None
    with pytest.raises(NotFoundError):
        await invoices.download_invoice(order.id)

    await storage.upload(f"order_{order.id}.pdf", b"%PDF-1.7 legacy")

    assert await invoices.get_invoice_url(order.id) == storage.public_url(f"order_{order.id}.pdf")
    name, path = await invoices.download_invoice(order.id)
    assert name == f"order_{order.id}.pdf"
    assert path.read_bytes() == b"%PDF-1.7 legacy"


async def test_folder_invoice_preferred_over_other_pdfs(invoices, storage, order):
    await storage.upload(f"order_{order.id}/receipt.pdf", b"%PDF receipt")
    await storage.upload(f"order_{order.id}/invoice_old.pdf", b"%PDF invoice")

    assert await invoices.get_invoice_url(order.id) == storage.public_url(
        f"order_{order.id}/invoice_old.pdf"
    )


async def test_storage_rejects_keys_outside_bucket(tmp_path):
    storage = LocalBucketStorage(tmp_path, "invoices", "http://files.test/")
    with pytest.raises(ValidationError):
        await storage.upload("../escape.pdf", b"x")
    with pytest.raises(ValidationError):
        storage.file_path("../../etc/passwd")
    assert not (tmp_path / "escape.pdf").exists()
    with pytest.raises(NotFoundError):
        storage.file_path("missing.pdf")
    assert storage.list("nothing-here") == []
    assert storage.public_url("a/b.pdf") == "http://files.test/invoices/a/b.pdf"


async def test_checkout_survives_invoice_render_failure(session, storage, gaming_selection, monkeypatch):
    def broken_render(*args, **kwargs):
        raise RuntimeError("cannot save document")

    monkeypatch.setattr("app.services.invoice.render_invoice", broken_render)
    checkout = CheckoutService(session, CLIENT_ID, storage)

    result = await checkout.place_order(
        OrderCreate(
            customer_name="Asha Verma",
            customer_email="asha@example.com",
            address="12 MG Road",
            city="Bengaluru",
            build_type="gaming",
            components=gaming_selection,
        )
    )

    assert result.invoice_url is None
    assert await OrderService(session, CLIENT_ID).get_order(result.order.id)
    assert await InvoiceService(session, CLIENT_ID, storage).list_files(result.order.id) == []
