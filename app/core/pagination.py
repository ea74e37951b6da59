"""Pagination helpers for list endpoints."""


from typing import Any, Optional

from fastapi import Query
from pydantic import BaseModel


class PaginationParams:
    """FastAPI dependency for `?page=1&limit=20&sort=created_at&order=desc`.

    ``sort`` and ``order`` stay ``None`` unless the caller sends them, so each
    service can apply its own default ordering.
    """

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: int = Query(default=20, ge=1, le=200, description="Items per page"),
        sort: Optional[str] = Query(default=None, description="Sort field"),
        order: Optional[str] = Query(default=None, pattern="^(asc|desc)$", description="Sort order"),
    ):
        self.page = page
        self.limit = limit
        self.sort = sort
        self.order = order

    @classmethod
    def of(
        cls, page: int = 1, limit: int = 20, sort: str | None = None, order: str | None = None,
    ) -> "PaginationParams":
        """Build params outside a request (services, tests)."""
        return cls(page=page, limit=limit, sort=sort, order=order)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def list_kwargs(self, sort: str = "created_at", order: str = "desc") -> dict[str, Any]:
        """Keyword arguments for ``BaseRepository.list``; *sort*/*order* are the fallbacks."""
        return {
            "offset": self.offset,
            "limit": self.limit,
            "order_by": self.sort or sort,
            "order": self.order or order,
        }


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

    model_config = {"populate_by_name": True}
