"""Merchant dashboard notifications."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotFoundError
from storefront.models.notification import Notification, NotificationType
from storefront.services.inventory_service import LowStockAlert

logger = logging.getLogger(__name__)

PRODUCTS_DASHBOARD_LINK = "/dashboard/products"


def low_stock_message(alert: LowStockAlert) -> str:
    if alert.variant_key:
        return (
            f"Low stock alert: {alert.product_name} ({alert.variant_key}) "
            f"- Only {alert.remaining_stock} left"
        )
    return f"Low stock alert: {alert.product_name} - Only {alert.remaining_stock} left"


class NotificationService:
    """Creates and reads merchant notifications."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_low_stock_notification(self, alert: LowStockAlert) -> Notification | None:
        """Record a low-stock notification unless an unread one already exists.

        Best effort: failures are logged and swallowed so they never affect the
        order update that triggered them.

        Returns:
            The new notification, or None if it was deduplicated or failed.
        """
        notification_type = (
            NotificationType.LOW_STOCK_VARIANT
            if alert.variant_key
            else NotificationType.LOW_STOCK_PRODUCT
        )
        try:
            existing = await self.db.execute(
                select(Notification.id)
                .where(
                    Notification.user_id == alert.store_id,
                    Notification.product_id == alert.product_id,
                    Notification.type == notification_type.value,
                    Notification.is_read == False,  # noqa: E712
                )
                .limit(1)
            )
            if existing.scalar_one_or_none() is not None:
                logger.debug(
                    "Unread %s notification already exists for product %s",
                    notification_type.value,
                    alert.product_id,
                )
                return None

            notification = Notification(
                user_id=alert.store_id,
                store_id=alert.store_id,
                type=notification_type.value,
                product_id=alert.product_id,
                product_name=alert.product_name,
                variant_key=alert.variant_key,
                remaining_stock=alert.remaining_stock,
                message=low_stock_message(alert),
                link=PRODUCTS_DASHBOARD_LINK,
                is_read=False,
            )
            self.db.add(notification)
            await self.db.commit()
            return notification
        except Exception:
            logger.exception("Error creating low stock notification for %s", alert.product_id)
            await self.db.rollback()
            return None

    async def list_for_user(
        self, user_id: str, *, unread_only: bool = False, limit: int = 50
    ) -> list[Notification]:
        """Newest notifications for ``user_id``."""
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read == False)  # noqa: E712
        stmt = stmt.order_by(Notification.created_at.desc()).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_unread(self, user_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            )
        )
        return (await self.db.execute(stmt)).scalar() or 0

    async def mark_read(self, user_id: str, notification_id: str) -> Notification:
        """Mark one of the caller's notifications as read."""
        notification = await self.db.get(Notification, notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification not found")

        notification.is_read = True
        await self.db.commit()
        return notification
