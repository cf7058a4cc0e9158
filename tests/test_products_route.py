"""Tests for product endpoints: dashboard CRUD and back-in-stock sign-ups."""

from collections.abc import Callable
from typing import Any
from unittest.mock import patch

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.product import Product
from storefront.models.store import Store
from storefront.models.user import UserProfile
from storefront.services.catalog_service import CatalogService
from tests.conftest import OTHER_USER_ID, TEST_SLUG, TEST_USER_ID

NOTIFY_URL = "/api/v1/products/notify"


class TestNotifyWhenAvailable:
    async def test_missing_fields(self, unauthed_client: AsyncClient) -> None:
        response = await unauthed_client.post(NOTIFY_URL, json={"email": "a@b.co"})
        assert response.status_code == 400
        assert response.json() == {"error": "Product ID and email are required"}

    async def test_invalid_email(self, unauthed_client: AsyncClient) -> None:
        response = await unauthed_client.post(
            NOTIFY_URL, json={"productId": "p1", "email": "not-an-email"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid email address"}

    async def test_unknown_product(self, unauthed_client: AsyncClient) -> None:
        response = await unauthed_client.post(
            NOTIFY_URL, json={"productId": "missing", "email": "a@b.co"}
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    async def test_subscribes_lowercased_email_once(
        self,
        unauthed_client: AsyncClient,
        db_session: AsyncSession,
        store: Store,
        product_factory: Callable[..., Any],
    ) -> None:
        product = await product_factory(inventory=0)

        first = await unauthed_client.post(
            NOTIFY_URL, json={"productId": product.id, "email": "Shopper@Example.com"}
        )
        second = await unauthed_client.post(
            NOTIFY_URL, json={"productId": product.id, "email": "shopper@example.com"}
        )

        assert first.status_code == 200
        assert first.json() == {
            "success": True,
            "message": "You will be notified when this product is back in stock",
        }
        assert second.status_code == 200
        assert second.json()["message"] == "You are already on the notification list"

        await db_session.refresh(product)
        assert product.notify_when_available == ["shopper@example.com"]


class TestCreateProduct:
    async def test_create_product(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        store: Store,
        profile_factory: Callable[..., Any],
    ) -> None:
        await profile_factory()

        response = await client.post(
            "/api/v1/products",
            json={"name": "Tee", "price": 19.5, "category": "Shirts", "inventory": 40},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Tee"
        assert data["storeId"] == TEST_USER_ID
        assert data["inventory"] == 40
        assert data["quantity"] == 40
        assert data["variantStock"] is None

        await db_session.refresh(store)
        assert store.has_products is True
        profile = await db_session.get(UserProfile, TEST_USER_ID)
        assert profile is not None
        await db_session.refresh(profile)
        assert profile.onboarding["addedFirstProduct"] is True

    async def test_create_variant_product(self, client: AsyncClient, store: Store) -> None:
        response = await client.post(
            "/api/v1/products",
            json={"name": "Hoodie", "price": 50, "variantStock": {"color:red|size:M": 4}},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["variantStock"] == {"color:red|size:M": 4}
        assert data["inventory"] is None

    async def test_both_stock_kinds_rejected(self, client: AsyncClient, store: Store) -> None:
        response = await client.post(
            "/api/v1/products",
            json={"name": "Hoodie", "price": 50, "inventory": 3, "variantStock": {"size:M": 4}},
        )
        assert response.status_code == 400
        assert "error" in response.json()

    async def test_requires_a_store(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/products", json={"name": "Tee", "price": 10})
        assert response.status_code == 404
        assert response.json() == {"error": "Store not found"}


class TestListAndUpdateProducts:
    async def test_list_is_paginated_and_scoped(
        self,
        client: AsyncClient,
        store: Store,
        other_store: Store,
        product_factory: Callable[..., Any],
    ) -> None:
        for i in range(3):
            await product_factory(name=f"Mine {i}", inventory=1)
        await product_factory(store_id=OTHER_USER_ID, name="Theirs", inventory=1)

        response = await client.get("/api/v1/products", params={"page": 1, "pageSize": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["pages"] == 2
        assert data["pageSize"] == 2
        assert len(data["items"]) == 2
        assert all(item["storeId"] == TEST_USER_ID for item in data["items"])

    async def test_restock(
        self, client: AsyncClient, store: Store, product_factory: Callable[..., Any]
    ) -> None:
        product = await product_factory(inventory=0)

        response = await client.patch(
            f"/api/v1/products/{product.id}", json={"inventory": 25, "lowStockThreshold": 5}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["inventory"] == 25
        assert data["quantity"] == 25
        assert data["lowStockThreshold"] == 5

    async def test_switching_stock_kind_rejected(
        self, client: AsyncClient, store: Store, product_factory: Callable[..., Any]
    ) -> None:
        product = await product_factory(variant_stock={"size:M": 1})

        response = await client.patch(f"/api/v1/products/{product.id}", json={"inventory": 5})

        assert response.status_code == 400

    async def test_other_owners_product_is_not_found(
        self,
        client: AsyncClient,
        other_store: Store,
        product_factory: Callable[..., Any],
    ) -> None:
        product = await product_factory(store_id=OTHER_USER_ID, inventory=1)

        response = await client.patch(f"/api/v1/products/{product.id}", json={"price": 1})

        assert response.status_code == 404

    async def test_null_required_field_rejected(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        store: Store,
        product_factory: Callable[..., Any],
    ) -> None:
        product = await product_factory(price=12.0, inventory=3)

        response = await client.patch(f"/api/v1/products/{product.id}", json={"price": None})

        assert response.status_code == 400
        assert response.json() == {"error": "price cannot be null"}
        await db_session.refresh(product)
        assert product.price == 12.0

    async def test_null_variant_stock_rejected(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        store: Store,
        product_factory: Callable[..., Any],
    ) -> None:
        product = await product_factory(variant_stock={"size:M": 2})

        response = await client.patch(
            f"/api/v1/products/{product.id}", json={"variantStock": None}
        )

        assert response.status_code == 400
        await db_session.refresh(product)
        assert product.variant_stock == {"size:M": 2}

    async def test_negative_variant_stock_rejected(
        self, client: AsyncClient, store: Store, product_factory: Callable[..., Any]
    ) -> None:
        product = await product_factory(variant_stock={"size:M": 2})

        response = await client.patch(
            f"/api/v1/products/{product.id}", json={"variantStock": {"size:M": -1}}
        )

        assert response.status_code == 400

    async def test_nullable_field_can_be_cleared(
        self, client: AsyncClient, store: Store, product_factory: Callable[..., Any]
    ) -> None:
        product = await product_factory(inventory=3, low_stock_threshold=2)

        response = await client.patch(
            f"/api/v1/products/{product.id}", json={"lowStockThreshold": None}
        )

        assert response.status_code == 200
        assert response.json()["lowStockThreshold"] is None


class TestVariantKeysOnWrite:
    async def test_unsorted_key_is_stored_canonically(
        self, client: AsyncClient, store: Store
    ) -> None:
        response = await client.post(
            "/api/v1/products",
            json={
                "name": "Hoodie",
                "price": 50,
                "variantStock": {"size:M|color:red": 5},
                "variantLowStockThreshold": {"size:M|color:red": 2},
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["variantStock"] == {"color:red|size:M": 5}
        assert data["variantLowStockThreshold"] == {"color:red|size:M": 2}

    async def test_malformed_key_rejected(self, client: AsyncClient, store: Store) -> None:
        response = await client.post(
            "/api/v1/products",
            json={"name": "Hoodie", "price": 50, "variantStock": {"size-M": 5}},
        )

        assert response.status_code == 400
        assert "Invalid variant key" in response.json()["error"]

    async def test_keys_naming_the_same_variant_rejected(
        self, client: AsyncClient, store: Store
    ) -> None:
        response = await client.post(
            "/api/v1/products",
            json={
                "name": "Hoodie",
                "price": 50,
                "variantStock": {"size:M|color:red": 5, "color:red|size:M": 1},
            },
        )

        assert response.status_code == 400

    async def test_update_rewrites_keys(
        self, client: AsyncClient, store: Store, product_factory: Callable[..., Any]
    ) -> None:
        product = await product_factory(variant_stock={"color:red|size:M": 1})

        response = await client.patch(
            f"/api/v1/products/{product.id}", json={"variantStock": {"size:M|color:red": 9}}
        )

        assert response.status_code == 200
        assert response.json()["variantStock"] == {"color:red|size:M": 9}

    async def test_merchant_key_matches_checkout_and_fulfilment(
        self,
        client: AsyncClient,
        unauthed_client: AsyncClient,
        db_session: AsyncSession,
        store: Store,
    ) -> None:
        created = await client.post(
            "/api/v1/products",
            json={"name": "Tee", "price": 20, "variantStock": {"size:M|color:red": 5}},
        )
        product_id = created.json()["id"]

        checkout = await unauthed_client.post(
            f"/store/{TEST_SLUG}/orders",
            json={
                "customerEmail": "a@b.co",
                "items": [
                    {
                        "productId": product_id,
                        "quantity": 2,
                        "variant": {"color": "red", "size": "M"},
                    }
                ],
            },
        )
        assert checkout.status_code == 201

        fulfil = await client.patch(
            "/api/v1/orders/update-status",
            json={"orderId": checkout.json()["id"], "newStatus": "Processing"},
        )
        assert fulfil.status_code == 200

        product = await db_session.get(Product, product_id)
        assert product is not None
        await db_session.refresh(product)
        assert product.variant_stock == {"color:red|size:M": 3}


class TestRestockSubscriberList:
    async def test_distinct_emails_accumulate(
        self,
        unauthed_client: AsyncClient,
        db_session: AsyncSession,
        store: Store,
        product_factory: Callable[..., Any],
    ) -> None:
        product = await product_factory(inventory=0)

        for email in ("one@example.com", "two@example.com", "one@example.com"):
            response = await unauthed_client.post(
                NOTIFY_URL, json={"productId": product.id, "email": email}
            )
            assert response.status_code == 200

        await db_session.refresh(product)
        assert product.notify_when_available == ["one@example.com", "two@example.com"]

    async def test_subscriber_row_is_locked(
        self, db_session: AsyncSession, store: Store, product_factory: Callable[..., Any]
    ) -> None:
        product = await product_factory(inventory=0)
        statements: list[Any] = []
        original_execute = db_session.execute

        async def _recording_execute(statement: Any, *args: Any, **kwargs: Any) -> Any:
            statements.append(statement)
            return await original_execute(statement, *args, **kwargs)

        with patch.object(db_session, "execute", _recording_execute):
            added = await CatalogService(db_session).add_restock_subscriber(
                product.id, "a@b.co"
            )

        assert added is True
        assert any(getattr(s, "_for_update_arg", None) is not None for s in statements)
