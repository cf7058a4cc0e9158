"""Schemas for merchant signup and onboarding progress."""

from pydantic import Field

from storefront.schemas.common import BaseSchema


class SignupRequest(BaseSchema):
    """Signup answers submitted after the account is created in the auth service."""

    store_name: str = Field(..., min_length=1, max_length=255)
    sell_locations: list[str] = Field(default_factory=lambda: ["online-store"], min_length=1)
    business_goal: str = Field(default="new-business", max_length=100)
    product_type: str = Field(default="physical", max_length=100)


class SignupResponse(BaseSchema):
    user_id: str
    store_name: str
    store_name_slug: str
    plan: str
    promo_user: bool


class OnboardingProgress(BaseSchema):
    added_first_product: bool
    customized_store: bool
    named_store: bool
    percentage: float
