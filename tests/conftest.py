"""Pytest configuration and fixtures for the storefront API test suite.

Provides:
- A fresh SQLite database per test (aiosqlite, file in ``tmp_path``)
- An application built with ``create_app`` around that database
- Mock authentication (JWT bypass)
- Disabled rate limiting
- Model factory fixtures for StoreName/Store, UserProfile, Product, Order
  and PromoConfig

Clients use ``http://localhost`` so tenant routing passes requests through;
tenant rewrites are exercised by sending an explicit ``Host`` header.
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.auth import get_current_user
from storefront.core.config import Settings
from storefront.core.database import Database
from storefront.core.rate_limit import limiter
from storefront.main import create_app
from storefront.models.order import STATUS_PENDING, Order
from storefront.models.product import Product
from storefront.models.promo import EARLY_ACCESS_PROMO_ID, PromoConfig
from storefront.models.store import Store, StoreName, default_website
from storefront.models.user import PLAN_FREE, UserProfile

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TEST_USER_ID = "test-user-id"
TEST_USER_EMAIL = "test@example.com"
OTHER_USER_ID = "other-user-id"
TEST_SLUG = "test-store"
BASE_DOMAIN = "koopi.online"

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


# ---------------------------------------------------------------------------
# Settings, database and application
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        environment="development",
        debug=False,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        base_domain=BASE_DOMAIN,
        auth_url="http://auth.test",
        sentry_dsn="",
        default_low_stock_threshold=10,
        promo_total_spots=100,
    )


@pytest_asyncio.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """Database with every table created, disposed after the test."""
    db = Database(test_settings.database_url)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Session for test setup (factory fixtures) and assertions.

    Objects read here go stale when the app writes through its own session;
    call ``refresh`` before asserting on them.
    """
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def app(test_settings: Settings, database: Database) -> FastAPI:
    return create_app(test_settings, database=database)


# ---------------------------------------------------------------------------
# Auth mock
# ---------------------------------------------------------------------------


@pytest.fixture
def auth_user() -> dict[str, Any]:
    """Return the default authenticated test user payload (mimics decoded JWT)."""
    return {
        "sub": TEST_USER_ID,
        "email": TEST_USER_EMAIL,
    }


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(app: FastAPI, auth_user: dict[str, Any]) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated async test client."""

    async def _override_user() -> dict[str, Any]:
        return auth_user

    app.dependency_overrides[get_current_user] = _override_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://localhost",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def unauthed_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated async test client. Auth is NOT overridden."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://localhost",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Model Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def store_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that registers a store name and creates the store behind it."""

    async def _create(
        *,
        owner_id: str = TEST_USER_ID,
        slug: str = TEST_SLUG,
        store_name: str = "Test Store",
        enabled: bool = True,
        register: bool = True,
        create_store: bool = True,
        description: str = "A test store",
        category: str = "General",
    ) -> Store | None:
        if register:
            db_session.add(StoreName(slug=slug, owner_id=owner_id, store_name=store_name))

        store: Store | None = None
        if create_store:
            website = default_website(store_name)
            website["enabled"] = enabled
            store = Store(
                owner_id=owner_id,
                store_name=store_name,
                store_name_slug=slug,
                store_description=description,
                store_category=category,
                website=website,
            )
            db_session.add(store)

        await db_session.commit()
        if store is not None:
            await db_session.refresh(store)
        return store

    return _create


@pytest_asyncio.fixture
async def store(store_factory: Callable[..., Any]) -> Store:
    """A public store owned by the test user."""
    return await store_factory()


@pytest_asyncio.fixture
async def other_store(store_factory: Callable[..., Any]) -> Store:
    """A public store owned by someone else."""
    return await store_factory(
        owner_id=OTHER_USER_ID,
        slug="other-store",
        store_name="Other Store",
    )


@pytest.fixture
def profile_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates merchant profiles."""

    async def _create(
        *,
        user_id: str = TEST_USER_ID,
        email: str | None = TEST_USER_EMAIL,
        store_name: str | None = "Test Store",
        store_name_slug: str | None = TEST_SLUG,
        plan: str = PLAN_FREE,
        onboarding: dict[str, Any] | None = None,
    ) -> UserProfile:
        profile = UserProfile(
            id=user_id,
            email=email,
            store_name=store_name,
            store_name_slug=store_name_slug,
            subscription={"plan": plan, "status": "active"},
            onboarding=onboarding or {"isCompleted": True},
        )
        db_session.add(profile)
        await db_session.commit()
        await db_session.refresh(profile)
        return profile

    return _create


@pytest.fixture
def product_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Product instances."""

    async def _create(
        *,
        store_id: str = TEST_USER_ID,
        name: str = "Test Product",
        category: str = "General",
        price: float = 10.0,
        status: str = "Active",
        inventory: int | None = None,
        low_stock_threshold: int | None = None,
        variant_stock: dict[str, int] | None = None,
        variant_low_stock_threshold: dict[str, int] | None = None,
        sales_count: int = 0,
        product_id: str | None = None,
    ) -> Product:
        product = Product(
            store_id=store_id,
            name=name,
            description=f"{name} description",
            category=category,
            price=price,
            status=status,
            images=[],
            inventory=inventory,
            quantity=inventory,
            low_stock_threshold=low_stock_threshold,
            variant_stock=variant_stock,
            variant_low_stock_threshold=variant_low_stock_threshold,
            notify_when_available=[],
            sales_count=sales_count,
        )
        if product_id is not None:
            product.id = product_id
        db_session.add(product)
        await db_session.commit()
        await db_session.refresh(product)
        return product

    return _create


@pytest.fixture
def order_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates orders from ``(product, quantity, variant)`` tuples."""

    async def _create(
        *,
        store_id: str = TEST_USER_ID,
        items: list[tuple[Product, int, dict[str, str] | None]] | None = None,
        status: str = STATUS_PENDING,
        customer_email: str = "shopper@example.com",
    ) -> Order:
        stored_items: list[dict[str, Any]] = []
        total = 0.0
        for product, quantity, variant in items or []:
            item: dict[str, Any] = {
                "productId": product.id,
                "name": product.name,
                "quantity": quantity,
                "price": product.price,
            }
            if variant is not None:
                item["variant"] = variant
            stored_items.append(item)
            total += product.price * quantity

        order = Order(
            store_id=store_id,
            customer_email=customer_email,
            customer_name="Sam Shopper",
            items=stored_items,
            total=total,
            status=status,
        )
        db_session.add(order)
        await db_session.commit()
        await db_session.refresh(order)
        return order

    return _create


@pytest.fixture
def promo_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates the early-access counter row."""

    async def _create(
        *,
        total_spots: int = 100,
        used_spots: int = 0,
        is_active: bool = True,
    ) -> PromoConfig:
        promo = PromoConfig(
            id=EARLY_ACCESS_PROMO_ID,
            total_spots=total_spots,
            used_spots=used_spots,
            is_active=is_active,
        )
        db_session.add(promo)
        await db_session.commit()
        await db_session.refresh(promo)
        return promo

    return _create
