"""Async SQLAlchemy engine, session factory, declarative Base, and FastAPI dependency."""


from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings

# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
def build_engine(database_url: str, **overrides) -> AsyncEngine:
    """Create an async engine with the app's defaults for *database_url*."""
    kwargs: dict = {
        "pool_pre_ping": True,
        "echo": settings.app_env == "development",
    }
    # SQLite (local dev, tests) needs cross-thread access for aiosqlite
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    kwargs.update(overrides)
    return create_async_engine(database_url, **kwargs)


engine = build_engine(settings.database_url)

# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


async_session_factory = build_session_factory(engine)

# ---------------------------------------------------------------------------
# Declarative Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """All ORM models inherit from this base."""

# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session; roll back on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
