"""Product catalogue: dashboard CRUD, storefront browsing and restock sign-ups."""

import logging
import math
import re
from collections.abc import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import ProductNotFoundError, ValidationError
from storefront.models.product import Product
from storefront.models.store import Store
from storefront.models.user import UserProfile
from storefront.schemas.product import (
    AutocompleteSuggestion,
    ProductCreate,
    ProductUpdate,
    SortOption,
)
from storefront.services.inventory_service import canonical_variant_map

logger = logging.getLogger(__name__)

AUTOCOMPLETE_LIMIT = 8
_PRICE_RANGE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*-\s*(\d+(?:\.\d+)?)\s*$")

# Columns a partial update may not clear
NON_NULLABLE_FIELDS = frozenset({"name", "category", "price", "status"})


def parse_price_range(value: str | None) -> tuple[float, float] | None:
    """Parse ``"10-50"`` into ``(10.0, 50.0)``; empty or malformed means no filter."""
    if not value:
        return None
    match = _PRICE_RANGE_RE.match(value)
    if match is None:
        return None
    low, high = float(match.group(1)), float(match.group(2))
    return (low, high) if low <= high else (high, low)


def categories_of(products: Iterable[Product]) -> list[str]:
    """Distinct non-empty categories, sorted."""
    return sorted({p.category for p in products if p.category})


def _sort(products: list[Product], sort_by: SortOption) -> list[Product]:
    if sort_by == "price-low":
        return sorted(products, key=lambda p: p.price)
    if sort_by == "price-high":
        return sorted(products, key=lambda p: p.price, reverse=True)
    if sort_by == "name-asc":
        return sorted(products, key=lambda p: p.name.lower())
    if sort_by == "name-desc":
        return sorted(products, key=lambda p: p.name.lower(), reverse=True)
    if sort_by == "popular":
        return sorted(products, key=lambda p: p.sales_count or 0, reverse=True)
    return sorted(products, key=lambda p: p.created_at, reverse=True)


def filter_products(
    products: Sequence[Product],
    *,
    search: str | None = None,
    category: str | None = None,
    price_range: str | None = None,
    sort_by: SortOption = "newest",
) -> list[Product]:
    """Apply the storefront search box, category, price and sort controls."""
    term = (search or "").strip().lower()
    bounds = parse_price_range(price_range)

    selected = [
        p
        for p in products
        if (not term or term in p.name.lower())
        and (not category or p.category == category)
        and (bounds is None or bounds[0] <= p.price <= bounds[1])
    ]
    return _sort(selected, sort_by)


def autocomplete(
    products: Sequence[Product],
    term: str,
    *,
    limit: int = AUTOCOMPLETE_LIMIT,
) -> list[AutocompleteSuggestion]:
    """Search-box suggestions: matching product names, then matching categories."""
    needle = term.strip().lower()
    if not needle:
        return []

    suggestions = [
        AutocompleteSuggestion(type="product", name=p.name, category=p.category or None)
        for p in products
        if needle in p.name.lower()
    ]
    suggestions.extend(
        AutocompleteSuggestion(type="category", name=c)
        for c in categories_of(products)
        if needle in c.lower()
    )
    return suggestions[:limit]


def _canonical_or_none(counts: dict[str, int] | None) -> dict[str, int] | None:
    if counts is None:
        return None
    try:
        return canonical_variant_map(counts)
    except ValueError as e:
        raise ValidationError(str(e)) from e


class CatalogService:
    """Reads and writes products."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_storefront_products(self, store_id: str) -> list[Product]:
        """Products a shopper can see: the store's active products."""
        stmt = select(Product).where(
            Product.store_id == store_id,
            Product.status == "Active",
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_products(
        self, store_id: str, *, page: int = 1, page_size: int = 20
    ) -> tuple[list[Product], int, int]:
        """A page of the store's products for the dashboard.

        Returns:
            (products, total, pages)
        """
        count_stmt = select(func.count()).select_from(Product).where(Product.store_id == store_id)
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = (
            select(Product)
            .where(Product.store_id == store_id)
            .order_by(Product.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total, math.ceil(total / page_size)

    async def create_product(self, store: Store, data: ProductCreate) -> Product:
        """Add a product and tick the "first product" onboarding step."""
        product = Product(
            store_id=store.owner_id,
            name=data.name,
            description=data.description,
            category=data.category,
            price=data.price,
            status=data.status,
            images=list(data.images),
            inventory=data.inventory,
            quantity=data.inventory,
            low_stock_threshold=data.low_stock_threshold,
            variant_stock=_canonical_or_none(data.variant_stock),
            variant_low_stock_threshold=_canonical_or_none(data.variant_low_stock_threshold),
            notify_when_available=[],
        )
        if product.variant_stock is None and product.inventory is None:
            product.inventory = product.quantity = 0
        self.db.add(product)

        store.has_products = True
        profile = await self.db.get(UserProfile, store.owner_id)
        if profile is not None and not profile.onboarding.get("addedFirstProduct"):
            profile.onboarding = {**profile.onboarding, "addedFirstProduct": True}

        await self.db.commit()
        logger.info("Product %s created for store %s", product.id, store.owner_id)
        return product

    async def update_product(self, owner_id: str, product_id: str, data: ProductUpdate) -> Product:
        """Apply a partial update to one of the owner's products.

        Raises:
            ProductNotFoundError: If the product is missing or owned by someone else.
            ValidationError: If the update clears a required field or the
                product's stock, switches stock kind, or carries a malformed
                variant key.
        """
        product = await self.db.get(Product, product_id)
        if product is None or product.store_id != owner_id:
            raise ProductNotFoundError(product_id)

        changes = data.model_dump(exclude_unset=True)
        cleared = sorted(
            field for field in NON_NULLABLE_FIELDS if field in changes and changes[field] is None
        )
        if cleared:
            raise ValidationError(f"{', '.join(cleared)} cannot be null")

        uses_variants = product.variant_stock is not None
        stock_field = "variant_stock" if uses_variants else "inventory"
        if stock_field in changes and changes[stock_field] is None:
            raise ValidationError("Stock cannot be cleared; set it to 0 instead")
        if ("inventory" in changes and uses_variants) or (
            "variant_stock" in changes and not uses_variants
        ):
            raise ValidationError("A product tracks either inventory or variantStock, not both")

        for field in ("variant_stock", "variant_low_stock_threshold"):
            if field in changes:
                changes[field] = _canonical_or_none(changes[field])

        for field, value in changes.items():
            setattr(product, field, value)
        if "inventory" in changes:
            product.quantity = product.inventory

        await self.db.commit()
        return product

    async def add_restock_subscriber(self, product_id: str, email: str) -> bool:
        """Add ``email`` to the product's back-in-stock list.

        Returns:
            False if the email was already on the list.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        # Locked so concurrent sign-ups append one after another
        stmt = (
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        product = (await self.db.execute(stmt)).scalar_one_or_none()
        if product is None:
            raise ProductNotFoundError(product_id)

        email = email.lower()
        subscribers = list(product.notify_when_available or [])
        if email in subscribers:
            await self.db.rollback()
            return False

        product.notify_when_available = [*subscribers, email]
        await self.db.commit()
        logger.info("Restock subscriber added to product %s", product_id)
        return True
