"""API v1 router combining all route modules."""

from fastapi import APIRouter

from storefront.api.v1 import health, notifications, onboarding, orders, products, stores

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Signup, store-name availability and launchpad progress
api_router.include_router(
    onboarding.router,
    tags=["onboarding"],
)

# Store creation and dashboard settings (requires auth)
api_router.include_router(
    stores.router,
    prefix="/stores",
    tags=["stores"],
)

# Products (dashboard CRUD requires auth; back-in-stock sign-up is public)
api_router.include_router(
    products.router,
    prefix="/products",
    tags=["products"],
)

# Orders (dashboard status changes drive inventory)
api_router.include_router(
    orders.router,
    prefix="/orders",
    tags=["orders"],
)

# Dashboard notifications (requires auth)
api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["notifications"],
)
