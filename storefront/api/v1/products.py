"""Product endpoints: dashboard catalogue management and back-in-stock sign-ups."""

import re

from fastapi import APIRouter, HTTPException, Query, Request, status

from storefront.core.deps import CurrentUser, DBSession, OwnedStore, get_user_id
from storefront.core.rate_limit import limiter
from storefront.schemas.common import EMAIL_PATTERN, PaginatedResponse, SuccessResponse
from storefront.schemas.product import (
    NotifyRequest,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from storefront.services.catalog_service import CatalogService

router = APIRouter()

_EMAIL_RE = re.compile(EMAIL_PATTERN)


@router.get("", response_model=PaginatedResponse[ProductResponse])
async def list_products(
    user: CurrentUser,
    db: DBSession,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
) -> PaginatedResponse[ProductResponse]:
    """List the caller's products."""
    service = CatalogService(db)
    products, total, pages = await service.list_products(
        get_user_id(user), page=page, page_size=page_size
    )
    return PaginatedResponse[ProductResponse](
        items=[ProductResponse.model_validate(p) for p in products],
        total=total,
        page=page,
        page_size=page_size,
        pages=pages,
    )


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    store: OwnedStore,
    db: DBSession,
) -> ProductResponse:
    """Add a product to the caller's store."""
    product = await CatalogService(db).create_product(store, data)
    return ProductResponse.model_validate(product)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    user: CurrentUser,
    db: DBSession,
) -> ProductResponse:
    """Restock, reprice or edit one of the caller's products."""
    product = await CatalogService(db).update_product(get_user_id(user), product_id, data)
    return ProductResponse.model_validate(product)


@router.post("/notify", response_model=SuccessResponse)
@limiter.limit("10/minute")
async def notify_when_available(
    request: Request,  # noqa: ARG001
    data: NotifyRequest,
    db: DBSession,
) -> SuccessResponse:
    """Register a shopper's email to hear when a product is back in stock.

    Idempotent: repeating the request for the same email succeeds.
    """
    if not data.product_id or not data.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product ID and email are required",
        )
    if not _EMAIL_RE.match(data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email address",
        )

    added = await CatalogService(db).add_restock_subscriber(data.product_id, data.email)
    if not added:
        return SuccessResponse(message="You are already on the notification list")
    return SuccessResponse(message="You will be notified when this product is back in stock")
