"""Shared fixtures: in-memory SQLite schema, service sessions, and an API client."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

import app.domain  # noqa: F401  (registers every model on Base.metadata)
from app.core.config import settings
from app.db.base import Base, build_engine, build_session_factory, get_db

CLIENT_ID = "test-client"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test, shared across connections via StaticPool."""
    engine = build_engine("sqlite+aiosqlite://", poolclass=StaticPool, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage_root(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "storage_root", str(tmp_path))
    return tmp_path


@pytest.fixture
async def client(session_factory, storage_root, monkeypatch) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client against the app with the DB dependency pointed at the test engine."""
    from app.main import app

    monkeypatch.setattr(settings, "audit_enabled", False)
    monkeypatch.setattr(settings, "resend_api_key", None)

    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.state.session_factory = session_factory

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http

    app.dependency_overrides.clear()


@pytest.fixture
def gaming_selection() -> dict[str, str]:
    """Recommended gaming build at a 1,00,000 budget."""
    return {
        "processor": "cpu-2",
        "graphics": "gpu-4",
        "memory": "ram-2",
        "storage": "storage-3",
        "cooling": "cooling-2",
        "power": "psu-1",
        "motherboard": "mobo-3",
        "pcCase": "case-1",
    }
