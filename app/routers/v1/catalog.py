"""Catalog routes: component lists, build recommendations, order price quotes."""

from __future__ import annotations

from fastapi import APIRouter, Query

from app.core.response import DataResponse
from app.schemas.catalog import (
    CatalogItemOut,
    PricingOut,
    PricingRequest,
    RecommendationOut,
    StorageOptionOut,
    WithinBudgetRequest,
)
from app.services import catalog
from app.services.charges import quote_order

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("/components", response_model=DataResponse[dict[str, list[CatalogItemOut]]])
async def list_components(
    build_type: str = Query(default="gaming", alias="buildType"),
    budget_tier: str = Query(default="midrange", alias="budgetTier"),
):
    """Components per type for the build wizard, trimmed for entry-level gaming."""
    grouped = catalog.get_components_by_category(build_type, budget_tier)
    return {
        "data": {t: [CatalogItemOut.model_validate(i) for i in items] for t, items in grouped.items()}
    }


@router.get("/storage-options", response_model=DataResponse[list[StorageOptionOut]])
async def list_storage_options():
    return {"data": [StorageOptionOut.model_validate(o) for o in catalog.EXTRA_STORAGE_OPTIONS]}


@router.post("/within-budget", response_model=DataResponse[list[CatalogItemOut]])
async def components_within_budget(body: WithinBudgetRequest):
    items = catalog.get_components_within_budget(body.component_type, body.budget, body.selected)
    return {"data": [CatalogItemOut.model_validate(i) for i in items]}


@router.get("/recommendations", response_model=DataResponse[list[RecommendationOut]])
async def recommend_builds(
    build_type: str = Query(default="gaming", alias="buildType"),
    budget: int = Query(..., gt=0),
):
    builds = catalog.get_recommended_builds(build_type, budget)
    return {"data": [RecommendationOut.model_validate(b) for b in builds]}


@router.post("/pricing", response_model=DataResponse[PricingOut])
async def quote_build(body: PricingRequest):
    """Build cost, assembly and delivery charges, GST and total for a selection."""
    extras = catalog.resolve_storage_options(body.extra_storage)
    pricing = quote_order(body.components, extras)
    return {"data": PricingOut.model_validate(pricing.as_dict())}
