"""Dependency injection for FastAPI routes."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

# Re-export auth dependencies for convenience
from storefront.core.auth import CurrentUser, get_current_user, get_user_id
from storefront.core.config import Settings
from storefront.core.database import get_async_session
from storefront.models.store import Store


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Alias for get_async_session so routes and tests share one override point."""
    async for session in get_async_session(request):
        yield session


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings  # type: ignore[no-any-return]


# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]


async def get_owned_store(user: CurrentUser, db: DBSession) -> Store:
    """Load the caller's store (one store per owner, keyed by owner id)."""
    store = await db.get(Store, get_user_id(user))
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Store not found",
        )
    return store


OwnedStore = Annotated[Store, Depends(get_owned_store)]


__all__ = [
    "AppSettings",
    "CurrentUser",
    "DBSession",
    "OwnedStore",
    "get_app_settings",
    "get_current_user",
    "get_db",
    "get_owned_store",
    "get_user_id",
]
