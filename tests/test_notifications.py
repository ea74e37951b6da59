import base64
import json
from datetime import datetime

import httpx
import pytest

from app.core.config import settings
from app.services.notifications import EmailService, order_confirmation_html, quotation_decision_html


class FakeResend:
    """Records provider calls; serves attachments from a dict of url -> (status, bytes)."""

    def __init__(self, status_code=200, files=None):
        self.status_code = status_code
        self.files = files or {}
        self.posts = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            status, content = self.files.get(str(request.url), (404, b""))
            return httpx.Response(status, content=content)
        self.posts.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="provider exploded")
        return httpx.Response(200, json={"id": "email_123"})

    def payload(self, index=0):
        return json.loads(self.posts[index].content)


@pytest.fixture
def enabled(monkeypatch):
    monkeypatch.setattr(settings, "resend_api_key", "re_test_key")


def _service(transport) -> EmailService:
    return EmailService(httpx.AsyncClient(transport=httpx.MockTransport(transport)))


async def test_disabled_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "resend_api_key", None)
    fake = FakeResend()
    assert await _service(fake).send_email("a@example.com", "Hi", "<p>Hi</p>") is False
    assert fake.posts == []


async def test_missing_fields_are_rejected(enabled):
    fake = FakeResend()
    assert await _service(fake).send_email("", "Hi", "<p>Hi</p>") is False
    assert await _service(fake).send_email("a@example.com", "", "<p>Hi</p>") is False
    assert fake.posts == []


async def test_send_rebrands_and_authenticates(enabled):
    fake = FakeResend()
    sent = await _service(fake).send_email("a@example.com", "NexusBuild order", "<p>Nexus Build rocks</p>")

    assert sent is True
    request = fake.posts[0]
    assert str(request.url) == settings.resend_api_url
    assert request.headers["Authorization"] == "Bearer re_test_key"
    payload = fake.payload()
    assert payload["to"] == ["a@example.com"]
    assert payload["from"] == settings.email_from
    assert payload["subject"] == "Assemblie order"
    assert payload["html"] == "<p>Assemblie rocks</p>"
    assert "attachments" not in payload


async def test_invoice_is_attached(enabled):
    url = "http://files.test/invoices/order_1/invoice_1.pdf"
    fake = FakeResend(files={url: (200, b"%PDF-1.7 test")})

    assert await _service(fake).send_email("a@example.com", "Invoice", "<p>x</p>", url) is True
    (attachment,) = fake.payload()["attachments"]
    assert attachment["filename"] == "invoice.pdf"
    assert base64.b64decode(attachment["content"]) == b"%PDF-1.7 test"


@pytest.mark.parametrize("files", [{}, {"http://files.test/x.pdf": (200, b"")}])
async def test_unfetchable_attachment_still_sends(enabled, files):
    fake = FakeResend(files=files)
    assert await _service(fake).send_email("a@example.com", "Invoice", "<p>x</p>", "http://files.test/x.pdf")
    assert "attachments" not in fake.payload()


async def test_provider_error_returns_false(enabled):
    assert await _service(FakeResend(status_code=500)).send_email("a@example.com", "Hi", "<p>x</p>") is False


async def test_unreachable_provider_returns_false(enabled):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert await _service(refuse).send_email("a@example.com", "Hi", "<p>x</p>") is False


async def test_order_confirmation(enabled):
    fake = FakeResend()
    sent = await _service(fake).send_order_confirmation(
        "asha@example.com", "Asha", "NXB-2506-ABCDEFGHIJ", "gaming", 104622,
    )

    assert sent is True
    payload = fake.payload()
    assert payload["subject"] == "Your Order Confirmation #NXB-2506-ABCDEFGHIJ - Assemblie"
    assert "₹1,04,622.00" in payload["html"]


def test_confirmation_html():
    html = order_confirmation_html(
        "Asha <script>", "NXB-2506-ABCDEFGHIJ", None, None, ordered_at=datetime(2025, 6, 3),
    )
    assert "Asha &lt;script&gt;" in html
    assert "June 3, 2025" in html
    assert "Custom PC" in html
    assert "N/A" in html
    assert f"{settings.tracking_page_url}?id=NXB-2506-ABCDEFGHIJ" in html


def test_quotation_decision_html():
    accepted = quotation_decision_html("Prime Components", "NXB-1", "accepted", 34999)
    assert "accepted" in accepted
    assert "₹34,999.00" in accepted
    rejected = quotation_decision_html("Prime Components", "NXB-1", "rejected", 34999)
    assert "not selected" in rejected
