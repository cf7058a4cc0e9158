"""Tests for dashboard notification endpoints."""

from unittest.mock import AsyncMock

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.notification import Notification, NotificationType
from storefront.services.inventory_service import LowStockAlert
from storefront.services.notification_service import NotificationService, low_stock_message
from tests.conftest import OTHER_USER_ID, TEST_USER_ID


def _alert(
    product_id: str = "p1",
    variant: str | None = None,
    remaining: int = 4,
    store_id: str = TEST_USER_ID,
) -> LowStockAlert:
    return LowStockAlert(
        store_id=store_id,
        product_id=product_id,
        product_name="Hoodie",
        variant_key=variant,
        remaining_stock=remaining,
    )


class TestLowStockMessage:
    def test_product_message(self) -> None:
        assert low_stock_message(_alert()) == "Low stock alert: Hoodie - Only 4 left"

    def test_variant_message(self) -> None:
        assert (
            low_stock_message(_alert(variant="size:M", remaining=2))
            == "Low stock alert: Hoodie (size:M) - Only 2 left"
        )


class TestNotificationService:
    async def test_product_and_variant_alerts_are_separate_types(
        self, db_session: AsyncSession
    ) -> None:
        service = NotificationService(db_session)

        first = await service.create_low_stock_notification(_alert())
        second = await service.create_low_stock_notification(_alert(variant="size:M"))
        duplicate = await service.create_low_stock_notification(_alert(variant="size:L"))

        assert first is not None and first.type == NotificationType.LOW_STOCK_PRODUCT.value
        assert second is not None and second.type == NotificationType.LOW_STOCK_VARIANT.value
        # One unread variant alert per product, whichever variant raised it
        assert duplicate is None
        assert await service.count_unread(TEST_USER_ID) == 2

    async def test_failure_is_swallowed(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("db down"))

        assert await NotificationService(session).create_low_stock_notification(_alert()) is None
        session.rollback.assert_awaited_once()


class TestNotificationRoutes:
    async def test_list_and_mark_read(self, client: AsyncClient, db_session: AsyncSession) -> None:
        service = NotificationService(db_session)
        await service.create_low_stock_notification(_alert(product_id="p1"))
        await service.create_low_stock_notification(_alert(product_id="p2"))
        await service.create_low_stock_notification(_alert(product_id="p3", store_id=OTHER_USER_ID))

        listing = await client.get("/api/v1/notifications")
        data = listing.json()
        assert data["unread"] == 2
        assert {n["productId"] for n in data["items"]} == {"p1", "p2"}

        target = data["items"][0]["id"]
        read = await client.patch(f"/api/v1/notifications/{target}/read")
        assert read.status_code == 200

        unread = await client.get("/api/v1/notifications", params={"unreadOnly": "true"})
        unread_data = unread.json()
        assert unread_data["unread"] == 1
        assert target not in [n["id"] for n in unread_data["items"]]
        assert len(unread_data["items"]) == 1

    async def test_cannot_mark_someone_elses_notification(
        self, client: AsyncClient, db_session: AsyncSession
    ) -> None:
        notification = await NotificationService(db_session).create_low_stock_notification(
            _alert(store_id=OTHER_USER_ID)
        )
        assert isinstance(notification, Notification)

        response = await client.patch(f"/api/v1/notifications/{notification.id}/read")

        assert response.status_code == 404
        assert response.json() == {"error": "Notification not found"}
