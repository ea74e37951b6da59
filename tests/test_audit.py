import asyncio

import pytest
from sqlalchemy import select

from app.core.config import settings
from app.domain.audit import AuditTrail
from app.middleware import audit
from app.middleware.audit import entity_from_path

ORDER_ID = "3f2b7c1e-9a4d-4e8b-b1c2-5d6e7f809a1b"


@pytest.mark.parametrize(
    "path, expected",
    [
        (f"/api/v1/orders/{ORDER_ID}/status", ("order", ORDER_ID)),
        (f"/api/v1/vendors/{ORDER_ID}", ("vendor", ORDER_ID)),
        ("/api/v1/customers", ("customer", None)),
        ("/", ("unknown", None)),
    ],
)
def test_entity_from_path(path, expected):
    assert entity_from_path(path) == expected


async def test_writes_are_audited(client, session_factory, monkeypatch):
    monkeypatch.setattr(settings, "audit_enabled", True)

    resp = await client.post("/api/v1/vendors", json={"storeName": "Zen Parts"})
    await client.get("/api/v1/vendors")
    await asyncio.gather(*list(audit._pending))

    async with session_factory() as session:
        rows = (await session.execute(select(AuditTrail))).scalars().all()

    assert len(rows) == 1
    (row,) = rows
    assert (row.method, row.status_code, row.entity_type) == ("POST", 201, "vendor")
    assert row.path == "/api/v1/vendors"
    assert row.client_id == settings.default_client_id
    assert resp.status_code == 201
