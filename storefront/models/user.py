"""Merchant profile model.

Accounts themselves live in the external auth service; this table holds the
storefront-side profile created at signup (chosen store name, subscription plan
and onboarding answers), keyed by the auth service's user id.
"""

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, JSONType

PLAN_FREE = "free"
PLAN_PRO = "pro"


class UserProfile(Base):
    """Merchant profile document."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    store_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    store_name_slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    store_logo_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    # {"plan", "status", "productCount", "promoUser", ...}
    subscription: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    # {"isCompleted", "sellLocations", "businessGoal", "productType", "addedFirstProduct", ...}
    onboarding: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)

    @property
    def plan(self) -> str:
        return str((self.subscription or {}).get("plan", PLAN_FREE))

    def __repr__(self) -> str:
        return f"<UserProfile {self.id} ({self.plan})>"
