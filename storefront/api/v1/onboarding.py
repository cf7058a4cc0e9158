"""Signup and onboarding endpoints."""

from fastapi import APIRouter, Request, status

from storefront.core.deps import AppSettings, CurrentUser, DBSession, get_user_id
from storefront.core.rate_limit import limiter
from storefront.schemas.onboarding import OnboardingProgress, SignupRequest, SignupResponse
from storefront.schemas.store import StoreNameAvailability
from storefront.services.onboarding_service import OnboardingService, slugify

router = APIRouter()


@router.get("/store-names/{name}", response_model=StoreNameAvailability)
async def check_store_name(name: str, db: DBSession) -> StoreNameAvailability:
    """Check whether a store name is free, suggesting alternatives when it is not."""
    service = OnboardingService(db)
    slug = slugify(name)
    available = await service.is_slug_available(slug)
    suggestions = [] if available else await service.suggest_slugs(slug)
    return StoreNameAvailability(slug=slug, available=available, suggestions=suggestions)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def signup(
    request: Request,  # noqa: ARG001
    data: SignupRequest,
    user: CurrentUser,
    db: DBSession,
    settings: AppSettings,
) -> SignupResponse:
    """Complete signup for an account already created in the auth service."""
    service = OnboardingService(db, promo_total_spots=settings.promo_total_spots)
    profile = await service.signup(get_user_id(user), user.get("email"), data)
    return SignupResponse(
        user_id=profile.id,
        store_name=profile.store_name or "",
        store_name_slug=profile.store_name_slug or "",
        plan=profile.plan,
        promo_user=bool(profile.subscription.get("promoUser")),
    )


@router.get("/onboarding/progress", response_model=OnboardingProgress)
async def onboarding_progress(user: CurrentUser, db: DBSession) -> OnboardingProgress:
    """Launchpad checklist for the caller."""
    return await OnboardingService(db).progress(get_user_id(user))
