"""Pydantic schemas for stores, website settings and the public storefront."""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from storefront.schemas.common import BaseSchema

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


# === Website Settings Schemas ===


class ThemeSettings(BaseSchema):
    """Storefront colours and typography."""

    primary_color: str = Field(default="#000000", pattern=HEX_COLOR)
    accent_color: str = Field(default="#333333", pattern=HEX_COLOR)
    background_color: str = Field(default="#ffffff", pattern=HEX_COLOR)
    text_color: str = Field(default="#000000", pattern=HEX_COLOR)
    font_family: str = Field(default="inter", max_length=100)


class HeroSettings(BaseSchema):
    """Storefront hero banner."""

    title: str = Field(default="", max_length=200)
    subtitle: str = Field(default="", max_length=500)
    cta_text: str = Field(default="Shop Now", max_length=100)
    alignment: Literal["left", "center", "right"] = "left"
    background_image: str = Field(default="", max_length=2048)


class WebsiteSettings(BaseSchema):
    """Website block of a store document."""

    enabled: bool = False
    logo: str = ""
    template_id: str = "classic"
    theme: ThemeSettings = Field(default_factory=ThemeSettings)
    hero: HeroSettings = Field(default_factory=HeroSettings)


class WebsiteSettingsUpdate(BaseSchema):
    """Partial update for website settings."""

    enabled: bool | None = None
    logo: str | None = Field(default=None, max_length=2048)
    template_id: str | None = Field(default=None, max_length=100)
    theme: ThemeSettings | None = None
    hero: HeroSettings | None = None


# === Store CRUD Schemas ===


class StoreCreate(BaseSchema):
    """Launchpad request creating the caller's store."""

    store_name: str = Field(..., min_length=1, max_length=255, description="Display name")
    store_description: str = Field(default="", max_length=5000)
    store_category: str = Field(default="", max_length=255)
    logo_url: str | None = Field(default=None, max_length=2048)


class StoreUpdate(BaseSchema):
    """Dashboard update of the caller's store."""

    store_description: str | None = Field(default=None, max_length=5000)
    store_category: str | None = Field(default=None, max_length=255)
    website: WebsiteSettingsUpdate | None = None


class StoreResponse(BaseSchema):
    """Store document as seen by its owner."""

    owner_id: str
    store_name: str | None
    store_name_slug: str | None
    store_description: str
    store_category: str
    website: dict[str, Any]
    has_products: bool
    has_customized_store: bool
    created_at: datetime
    updated_at: datetime


class PublicStoreResponse(BaseSchema):
    """Store document as served on its storefront."""

    store_name: str | None
    store_name_slug: str | None
    store_description: str
    store_category: str
    website: dict[str, Any]


class StoreNameAvailability(BaseSchema):
    """Result of a slug availability check."""

    slug: str
    available: bool
    suggestions: list[str] = []
