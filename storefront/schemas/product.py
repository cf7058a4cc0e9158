"""Pydantic schemas for products, storefront filtering and restock alerts."""

from datetime import datetime
from typing import Literal

from pydantic import Field, model_validator

from storefront.schemas.common import BaseSchema

SortOption = Literal["newest", "popular", "price-low", "price-high", "name-asc", "name-desc"]


def _check_variant_counts(counts: dict[str, int] | None, label: str) -> None:
    if counts and any(count < 0 for count in counts.values()):
        raise ValueError(f"{label} cannot be negative")


class ProductCreate(BaseSchema):
    """Dashboard request creating a product."""

    name: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=10000)
    category: str = Field(default="", max_length=255)
    price: float = Field(..., ge=0)
    status: str = Field(default="Active", max_length=50)
    images: list[str] = []
    inventory: int | None = Field(default=None, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)
    variant_stock: dict[str, int] | None = None
    variant_low_stock_threshold: dict[str, int] | None = None

    @model_validator(mode="after")
    def _single_stock_representation(self) -> "ProductCreate":
        if self.inventory is not None and self.variant_stock is not None:
            raise ValueError("A product tracks either inventory or variantStock, not both")
        _check_variant_counts(self.variant_stock, "Variant stock")
        _check_variant_counts(self.variant_low_stock_threshold, "Variant low stock threshold")
        return self


class ProductUpdate(BaseSchema):
    """Partial update of a product (restock, repricing, thresholds)."""

    name: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=10000)
    category: str | None = Field(default=None, max_length=255)
    price: float | None = Field(default=None, ge=0)
    status: str | None = Field(default=None, max_length=50)
    inventory: int | None = Field(default=None, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)
    variant_stock: dict[str, int] | None = None
    variant_low_stock_threshold: dict[str, int] | None = None

    @model_validator(mode="after")
    def _non_negative_variant_counts(self) -> "ProductUpdate":
        _check_variant_counts(self.variant_stock, "Variant stock")
        _check_variant_counts(self.variant_low_stock_threshold, "Variant low stock threshold")
        return self


class ProductResponse(BaseSchema):
    """Product as returned to the dashboard and storefront."""

    id: str
    store_id: str
    name: str
    description: str | None
    category: str
    price: float
    status: str
    images: list[str]
    inventory: int | None
    quantity: int | None
    low_stock_threshold: int | None
    variant_stock: dict[str, int] | None
    variant_low_stock_threshold: dict[str, int] | None
    created_at: datetime
    updated_at: datetime


class StorefrontProductList(BaseSchema):
    """Filtered storefront listing."""

    items: list[ProductResponse]
    categories: list[str]
    total: int
    filtered: int


class AutocompleteSuggestion(BaseSchema):
    """A search-box suggestion: either a product name or a category."""

    type: Literal["product", "category"]
    name: str
    category: str | None = None


class NotifyRequest(BaseSchema):
    """Back-in-stock signup. Fields are checked by the route to return 400s."""

    product_id: str | None = None
    email: str | None = None
