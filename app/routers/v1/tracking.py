"""Public order tracking (no admin data exposed)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.response import DataResponse
from app.db.base import get_db
from app.schemas.order import TrackingView
from app.services.order import OrderService

router = APIRouter(prefix="/tracking", tags=["Tracking"])


@router.get("/{tracking_id}", response_model=DataResponse[TrackingView])
async def track_order(
    tracking_id: str,
    session: AsyncSession = Depends(get_db),
):
    summary = await OrderService(session, settings.default_client_id).track(tracking_id)
    return {"data": TrackingView.model_validate(summary)}
