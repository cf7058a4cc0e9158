"""Merchant signup, launchpad store creation and dashboard store settings."""

import base64
import logging
import random
import re
import time
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import (
    ConflictError,
    SlugUnavailableError,
    StoreNotFoundError,
    ValidationError,
)
from storefront.models.store import Store, StoreName, default_website
from storefront.models.user import PLAN_FREE, PLAN_PRO, UserProfile
from storefront.schemas.onboarding import OnboardingProgress, SignupRequest
from storefront.schemas.store import StoreCreate, StoreUpdate
from storefront.services.promo_service import PromoService

logger = logging.getLogger(__name__)

MIN_SLUG_LENGTH = 3
MAX_SUGGESTIONS = 3
PLACEHOLDER_COLORS = [
    "#f56565",
    "#ed8936",
    "#ecc94b",
    "#48bb78",
    "#38b2ac",
    "#4299e1",
    "#667eea",
    "#9f7aea",
    "#ed64a6",
]
ONBOARDING_STEPS = ("addedFirstProduct", "customizedStore", "namedStore")

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase, hyphen-separated form of a store name: ``"Bob's Shop!"`` -> ``"bob-s-shop"``."""
    return _NON_SLUG_CHARS.sub("-", name.lower()).strip("-")


def placeholder_logo(store_name: str) -> str:
    """SVG data URL with the store's initial on a colour picked from its name."""
    initial = store_name[:1].upper()
    color = PLACEHOLDER_COLORS[len(store_name) % len(PLACEHOLDER_COLORS)]
    svg = (
        '<svg width="200" height="200" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="100%" height="100%" fill="{color}"/>'
        '<text x="50%" y="50%" font-family="Arial" font-size="100" fill="white" '
        f'text-anchor="middle" dy=".3em">{initial}</text></svg>'
    )
    encoded = base64.b64encode(svg.encode()).decode()
    return f"data:image/svg+xml;base64,{encoded}"


class OnboardingService:
    """Signup, store creation and the dashboard's view of a merchant's store."""

    def __init__(self, db: AsyncSession, *, promo_total_spots: int = 100) -> None:
        self.db = db
        self.promo = PromoService(db, total_spots=promo_total_spots)

    # === Store names ===

    async def is_slug_available(self, slug: str) -> bool:
        """Whether ``slug`` is free in the registry. Read errors count as taken."""
        try:
            return await self.db.get(StoreName, slug) is None
        except SQLAlchemyError:
            logger.exception("Error checking store name %s", slug)
            return False

    async def suggest_slugs(self, base_slug: str) -> list[str]:
        """Up to three free variations of a taken slug."""
        suffixes: list[Any] = [
            random.randint(0, 999),
            "shop",
            "store",
            "co",
            "market",
            int(time.time() * 1000) % 10000,
        ]
        suggestions: list[str] = []
        for suffix in suffixes:
            candidate = f"{base_slug}-{suffix}"
            if await self.is_slug_available(candidate):
                suggestions.append(candidate)
                if len(suggestions) >= MAX_SUGGESTIONS:
                    break
        return suggestions

    async def _require_available(self, slug: str) -> None:
        if len(slug) < MIN_SLUG_LENGTH:
            raise ValidationError("Store name must be at least 3 characters")
        if not await self.is_slug_available(slug):
            raise SlugUnavailableError(slug, await self.suggest_slugs(slug))

    # === Signup ===

    async def signup(self, user_id: str, email: str | None, data: SignupRequest) -> UserProfile:
        """Create the merchant profile and reserve the chosen store name.

        The availability check and the reservation are separate steps; if
        another signup takes the slug in between, the reservation fails on the
        registry's primary key and is reported as unavailable.

        Raises:
            ValidationError: If the store name is too short once slugified.
            SlugUnavailableError: If the slug is already registered.
            ConflictError: If the caller already signed up.
        """
        if await self.db.get(UserProfile, user_id) is not None:
            raise ConflictError("An account with this user already exists")

        store_name = data.store_name.strip()
        slug = slugify(store_name)
        await self._require_available(slug)

        is_pro = await self.promo.claim_spot()

        subscription: dict[str, Any] = {
            "plan": PLAN_PRO if is_pro else PLAN_FREE,
            "status": "active",
            "productCount": 0,
            "productLimit": None,
        }
        if is_pro:
            subscription.update({"promoUser": True, "promoExpiry": None})

        profile = UserProfile(
            id=user_id,
            email=email,
            store_name=store_name,
            store_name_slug=slug,
            subscription=subscription,
            onboarding={
                "isCompleted": True,
                "sellLocations": list(data.sell_locations),
                "businessGoal": data.business_goal,
                "productType": data.product_type,
                "addedFirstProduct": False,
                "customizedStore": False,
            },
        )
        self.db.add(profile)
        self.db.add(StoreName(slug=slug, owner_id=user_id, store_name=store_name))

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning("Store name %s was taken during signup of %s", slug, user_id)
            raise SlugUnavailableError(slug, await self.suggest_slugs(slug))

        logger.info("Merchant %s signed up as %s (plan=%s)", user_id, slug, profile.plan)
        return profile

    # === Launchpad ===

    async def create_store(self, owner_id: str, data: StoreCreate) -> Store:
        """Create the caller's store document and make sure its slug is reserved.

        Raises:
            ConflictError: If the caller already has a store.
            SlugUnavailableError: If another owner holds the slug.
        """
        if await self.db.get(Store, owner_id) is not None:
            raise ConflictError("Store already exists")

        store_name = data.store_name.strip()
        slug = slugify(store_name)
        record = await self.db.get(StoreName, slug)
        if record is None:
            await self._require_available(slug)
            self.db.add(StoreName(slug=slug, owner_id=owner_id, store_name=store_name))
        elif record.owner_id != owner_id:
            raise SlugUnavailableError(slug, await self.suggest_slugs(slug))

        logo = data.logo_url or placeholder_logo(store_name)
        store = Store(
            owner_id=owner_id,
            store_name=store_name,
            store_name_slug=slug,
            store_description=data.store_description,
            store_category=data.store_category,
            website=default_website(store_name, logo=logo),
            has_products=False,
            has_customized_store=False,
        )
        self.db.add(store)

        profile = await self.db.get(UserProfile, owner_id)
        if profile is not None:
            profile.store_name = profile.store_name or store_name
            profile.store_name_slug = profile.store_name_slug or slug
            profile.store_logo_url = logo

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise SlugUnavailableError(slug, await self.suggest_slugs(slug))

        logger.info("Store %s created for owner %s", slug, owner_id)
        return store

    # === Dashboard ===

    async def get_owner_store(self, owner_id: str) -> Store:
        """The caller's store, back-filling a missing name or slug from the profile."""
        store = await self.db.get(Store, owner_id)
        if store is None:
            raise StoreNotFoundError(owner_id)

        if not store.store_name or not store.store_name_slug:
            profile = await self.db.get(UserProfile, owner_id)
            if profile is not None and (profile.store_name or profile.store_name_slug):
                store.store_name = store.store_name or profile.store_name
                store.store_name_slug = store.store_name_slug or profile.store_name_slug
                await self.db.commit()
                logger.info("Back-filled store name for owner %s from profile", owner_id)

        return store

    async def update_store(self, owner_id: str, data: StoreUpdate) -> Store:
        """Apply dashboard edits; theme or hero changes mark the store customized."""
        store = await self.get_owner_store(owner_id)

        if data.store_description is not None:
            store.store_description = data.store_description
        if data.store_category is not None:
            store.store_category = data.store_category

        if data.website is not None:
            website = dict(store.website or {})
            for field, value in data.website.model_dump(exclude_unset=True, by_alias=True).items():
                if value is None:
                    continue
                current = website.get(field)
                # Nested blocks (theme, hero) are merged key by key
                if isinstance(value, dict) and isinstance(current, dict):
                    value = {**current, **value}
                website[field] = value
            store.website = website

            if data.website.theme is not None or data.website.hero is not None:
                store.has_customized_store = True
                profile = await self.db.get(UserProfile, owner_id)
                if profile is not None:
                    profile.onboarding = {**profile.onboarding, "customizedStore": True}

        await self.db.commit()
        return store

    async def progress(self, owner_id: str) -> OnboardingProgress:
        """Launchpad checklist for the caller."""
        profile = await self.db.get(UserProfile, owner_id)
        store = await self.db.get(Store, owner_id)
        onboarding = profile.onboarding if profile is not None else {}

        steps = {
            "addedFirstProduct": bool(
                onboarding.get("addedFirstProduct") or (store is not None and store.has_products)
            ),
            "customizedStore": bool(
                onboarding.get("customizedStore")
                or (store is not None and store.has_customized_store)
            ),
            "namedStore": bool(profile is not None and profile.store_name),
        }
        completed = sum(1 for step in ONBOARDING_STEPS if steps[step])

        return OnboardingProgress(
            added_first_product=steps["addedFirstProduct"],
            customized_store=steps["customizedStore"],
            named_store=steps["namedStore"],
            percentage=round(completed / len(ONBOARDING_STEPS) * 100, 2),
        )
