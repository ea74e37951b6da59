"""Audit logging middleware: records every state-changing request to audit_trail."""


import asyncio
import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.domain.audit import AuditTrail

logger = logging.getLogger(__name__)

# Methods that mutate state
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
_UUID_LEN = 36

# Keep references so pending writes are not garbage-collected mid-flight
_pending: set[asyncio.Task] = set()


def entity_from_path(path: str) -> tuple[str, str | None]:
    """``/api/v1/orders/<uuid>/status`` → ``("order", "<uuid>")``.

    The entity is the last collection segment that precedes an id, or the last
    segment when no id is present.
    """
    parts = [p for p in path.strip("/").split("/") if p]
    for index in range(len(parts) - 1, 0, -1):
        if len(parts[index]) == _UUID_LEN:
            return parts[index - 1].rstrip("s") or "unknown", parts[index]
    return (parts[-1].rstrip("s") if parts else "unknown"), None


class AuditMiddleware(BaseHTTPMiddleware):
    """Logs all write operations.

    Each audit row is written asynchronously AFTER the response is sent so it
    never adds latency to the request. Failures are logged, never raised.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        if settings.audit_enabled and request.method in _WRITE_METHODS:
            # Fire-and-forget: don't await here so the response is not delayed
            task = asyncio.create_task(
                self._record(request, response.status_code, duration_ms)
            )
            _pending.add(task)
            task.add_done_callback(_pending.discard)

        return response

    async def _record(
        self, request: Request, status_code: int, duration_ms: int
    ) -> None:
        entity_type, entity_id = entity_from_path(request.url.path)
        try:
            session_factory = request.app.state.session_factory
            async with session_factory() as session:
                session.add(
                    AuditTrail(
                        client_id=settings.default_client_id,
                        ip_address=request.client.host if request.client else None,
                        user_agent=request.headers.get("user-agent"),
                        method=request.method,
                        path=request.url.path[:500],
                        status_code=status_code,
                        duration_ms=duration_ms,
                        entity_type=entity_type,
                        entity_id=entity_id,
                    )
                )
                await session.commit()
        except Exception as exc:  # pragma: no cover
            logger.error("Audit write failed for %s %s: %s", request.method, request.url.path, exc)
