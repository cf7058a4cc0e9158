"""Tests for slug → store resolution and the public store endpoint."""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.store import Store, StoreName
from storefront.services.store_lookup_service import StoreLookupService
from tests.conftest import TEST_SLUG, TEST_USER_ID


class TestStoreLookupService:
    async def test_resolves_slug_to_store(self, db_session: AsyncSession, store: Store) -> None:
        resolved = await StoreLookupService(db_session).get_store_by_slug(TEST_SLUG)

        assert resolved is not None
        assert resolved.store.owner_id == TEST_USER_ID
        assert resolved.record.slug == TEST_SLUG

    async def test_display_name_comes_from_registry(
        self, db_session: AsyncSession, store_factory: Callable[..., Any]
    ) -> None:
        await store_factory(store_name="Registry Name")
        store = await db_session.get(Store, TEST_USER_ID)
        assert store is not None
        store.store_name = "Stale Name"
        await db_session.commit()

        resolved = await StoreLookupService(db_session).get_store_by_slug(TEST_SLUG)

        assert resolved is not None
        assert resolved.display_name == "Registry Name"
        # The store document is left untouched
        assert resolved.store.store_name == "Stale Name"

    async def test_unknown_slug_returns_none(self, db_session: AsyncSession) -> None:
        assert await StoreLookupService(db_session).get_store_by_slug("missing") is None

    async def test_unknown_slug_never_reads_stores(self, db_session: AsyncSession) -> None:
        service = StoreLookupService(db_session)
        service.load_store = AsyncMock(wraps=service.load_store)  # type: ignore[method-assign]

        with patch.object(db_session, "get", AsyncMock(wraps=db_session.get)) as get:
            assert await service.get_store_by_slug("missing") is None

        service.load_store.assert_not_awaited()
        assert [call.args[0] for call in get.await_args_list] == [StoreName]

    async def test_registry_entry_without_store_returns_none(
        self, db_session: AsyncSession, store_factory: Callable[..., Any]
    ) -> None:
        await store_factory(create_store=False)

        service = StoreLookupService(db_session)
        assert await service.resolve_owner(TEST_SLUG) is not None
        assert await service.get_store_by_slug(TEST_SLUG) is None

    async def test_read_failure_returns_none(self, db_session: AsyncSession, store: Store) -> None:
        service = StoreLookupService(db_session)
        service.load_store = AsyncMock(side_effect=SQLAlchemyError("connection lost"))  # type: ignore[method-assign]

        assert await service.get_store_by_slug(TEST_SLUG) is None

    async def test_slug_lookup_is_exact(self, db_session: AsyncSession, store: Store) -> None:
        assert await StoreLookupService(db_session).get_store_by_slug("Test-Store") is None


class TestPublicStoreRoute:
    async def test_get_store(self, unauthed_client: AsyncClient, store: Store) -> None:
        response = await unauthed_client.get(f"/store/{TEST_SLUG}")

        assert response.status_code == 200
        data = response.json()
        assert data["storeName"] == "Test Store"
        assert data["storeNameSlug"] == TEST_SLUG
        assert data["website"]["enabled"] is True
        assert data["website"]["theme"]["primaryColor"] == "#000000"
        # Owner-only fields are not exposed
        assert "ownerId" not in data

    async def test_disabled_website_is_not_found(
        self, unauthed_client: AsyncClient, store_factory: Callable[..., Any]
    ) -> None:
        await store_factory(enabled=False)

        response = await unauthed_client.get(f"/store/{TEST_SLUG}")

        assert response.status_code == 404
        assert response.json() == {"error": "Store not found"}

    async def test_unknown_slug_is_not_found(self, unauthed_client: AsyncClient) -> None:
        response = await unauthed_client.get("/store/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Store not found"}
