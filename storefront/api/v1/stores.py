"""Store creation and settings endpoints for the merchant dashboard."""

from fastapi import APIRouter, status

from storefront.core.deps import AppSettings, CurrentUser, DBSession, get_user_id
from storefront.schemas.store import StoreCreate, StoreResponse, StoreUpdate
from storefront.services.onboarding_service import OnboardingService

router = APIRouter()


@router.post(
    "",
    response_model=StoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create store",
    description="Create the caller's store from the launchpad and reserve its name.",
)
async def create_store(
    data: StoreCreate,
    user: CurrentUser,
    db: DBSession,
    settings: AppSettings,
) -> StoreResponse:
    """Create the caller's store."""
    service = OnboardingService(db, promo_total_spots=settings.promo_total_spots)
    store = await service.create_store(get_user_id(user), data)
    return StoreResponse.model_validate(store)


@router.get(
    "/me",
    response_model=StoreResponse,
    summary="Get own store",
    description="Get the caller's store, as shown on the dashboard.",
)
async def get_my_store(
    user: CurrentUser,
    db: DBSession,
) -> StoreResponse:
    """Get the caller's store."""
    store = await OnboardingService(db).get_owner_store(get_user_id(user))
    return StoreResponse.model_validate(store)


@router.patch(
    "/me",
    response_model=StoreResponse,
    summary="Update own store",
    description="Partially update description, category and website settings.",
)
async def update_my_store(
    data: StoreUpdate,
    user: CurrentUser,
    db: DBSession,
) -> StoreResponse:
    """Update the caller's store."""
    store = await OnboardingService(db).update_store(get_user_id(user), data)
    return StoreResponse.model_validate(store)
