"""Catalog, recommendation and pricing schemas."""

from pydantic import Field

from app.schemas.common import CamelModel


class CatalogItemOut(CamelModel):
    id: str
    name: str
    price: int


class StorageOptionOut(CatalogItemOut):
    type: str


class RecommendationOut(CamelModel):
    name: str
    description: str
    total_price: int
    components: dict[str, str]


class PricingRequest(CamelModel):
    components: dict[str, str]
    extra_storage: list[str] = Field(default_factory=list)


class PricingOut(CamelModel):
    build_cost: int
    build_charge: int
    weight: float
    delivery_charge: int
    gst: int
    total: int


class WithinBudgetRequest(CamelModel):
    component_type: str
    budget: int
    selected: dict[str, str] = Field(default_factory=dict)
