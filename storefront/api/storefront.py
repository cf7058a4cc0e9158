"""Public storefront endpoints.

These live under ``/store/{slug}``, the path tenant subdomains are rewritten to,
so ``https://<slug>.<base>/products`` is served by ``/store/<slug>/products``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from storefront.core.deps import DBSession
from storefront.core.rate_limit import limiter
from storefront.schemas.order import OrderCreate, OrderResponse
from storefront.schemas.product import (
    AutocompleteSuggestion,
    ProductResponse,
    SortOption,
    StorefrontProductList,
)
from storefront.schemas.store import PublicStoreResponse
from storefront.services.catalog_service import (
    CatalogService,
    autocomplete,
    categories_of,
    filter_products,
)
from storefront.services.order_service import OrderService
from storefront.services.store_lookup_service import ResolvedStore, StoreLookupService

router = APIRouter(prefix="/store", tags=["storefront"])


async def get_public_store(slug: str, db: DBSession) -> ResolvedStore:
    """Resolve ``slug`` to a store whose website is enabled."""
    resolved = await StoreLookupService(db).get_store_by_slug(slug)
    if resolved is None or not resolved.store.is_public:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Store not found",
        )
    return resolved


PublicStore = Annotated[ResolvedStore, Depends(get_public_store)]


@router.get("/{slug}", response_model=PublicStoreResponse)
async def get_storefront(resolved: PublicStore) -> PublicStoreResponse:
    """Store details and website settings for rendering the storefront."""
    store = resolved.store
    return PublicStoreResponse(
        store_name=resolved.display_name,
        store_name_slug=resolved.record.slug,
        store_description=store.store_description,
        store_category=store.store_category,
        website=store.website,
    )


@router.get("/{slug}/products", response_model=StorefrontProductList)
async def list_storefront_products(
    resolved: PublicStore,
    db: DBSession,
    search: str | None = Query(None, alias="searchTerm", max_length=200),
    category: str | None = Query(None),
    price_range: str | None = Query(None, alias="priceRange"),
    sort_by: SortOption = Query("newest", alias="sortBy"),
) -> StorefrontProductList:
    """Active products, filtered and sorted like the storefront's filter bar."""
    products = await CatalogService(db).list_storefront_products(resolved.store.owner_id)
    selected = filter_products(
        products,
        search=search,
        category=category,
        price_range=price_range,
        sort_by=sort_by,
    )
    return StorefrontProductList(
        items=[ProductResponse.model_validate(p) for p in selected],
        categories=categories_of(products),
        total=len(products),
        filtered=len(selected),
    )


@router.get("/{slug}/products/autocomplete", response_model=list[AutocompleteSuggestion])
async def autocomplete_products(
    resolved: PublicStore,
    db: DBSession,
    q: str = Query(..., min_length=1, max_length=200),
) -> list[AutocompleteSuggestion]:
    """Search-box suggestions."""
    products = await CatalogService(db).list_storefront_products(resolved.store.owner_id)
    return autocomplete(products, q)


@router.post("/{slug}/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
async def place_order(
    request: Request,  # noqa: ARG001
    data: OrderCreate,
    resolved: PublicStore,
    db: DBSession,
) -> OrderResponse:
    """Place an order with the store."""
    order = await OrderService(db).place_order(resolved.store, data)
    return OrderResponse.model_validate(order)
