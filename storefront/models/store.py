"""Store and store-name registry models for multi-tenant storefronts."""

from typing import Any

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, JSONType

DEFAULT_TEMPLATE_ID = "classic"

DEFAULT_THEME: dict[str, str] = {
    "primaryColor": "#000000",
    "accentColor": "#333333",
    "backgroundColor": "#ffffff",
    "textColor": "#000000",
    "fontFamily": "inter",
}


def default_hero(store_name: str) -> dict[str, str]:
    return {
        "title": f"Welcome to {store_name}",
        "subtitle": "Discover amazing products",
        "ctaText": "Shop Now",
        "alignment": "left",
        "backgroundImage": "",
    }


def default_website(store_name: str, logo: str = "") -> dict[str, Any]:
    """Website settings a freshly created store starts with (not yet public)."""
    return {
        "enabled": False,
        "logo": logo,
        "templateId": DEFAULT_TEMPLATE_ID,
        "theme": dict(DEFAULT_THEME),
        "hero": default_hero(store_name),
    }


class StoreName(Base):
    """Registry entry mapping a globally unique slug to the store owner.

    Created once at signup. The store itself is keyed by owner id, so the slug
    is the only place the public name lives.
    """

    __tablename__ = "store_names"

    slug: Mapped[str] = mapped_column(String(255), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    store_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<StoreName {self.slug} -> {self.owner_id}>"


class Store(Base):
    """A merchant's store. One per owner; ``owner_id`` is the primary key.

    ``website.enabled`` gates whether the storefront is publicly visible.
    """

    __tablename__ = "stores"

    owner_id: Mapped[str] = mapped_column(String(255), primary_key=True)

    store_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    store_name_slug: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    store_description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    store_category: Mapped[str] = mapped_column(String(255), default="", nullable=False)

    # Theme, hero, template and visibility
    website: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        default=dict,
        nullable=False,
    )

    # Dashboard onboarding flags
    has_products: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_customized_store: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    @property
    def is_public(self) -> bool:
        return bool((self.website or {}).get("enabled") is True)

    def __repr__(self) -> str:
        return f"<Store {self.store_name_slug} ({self.owner_id})>"
