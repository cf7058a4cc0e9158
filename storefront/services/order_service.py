"""Order placement and the status-change side-effect chain."""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import (
    OrderAccessDeniedError,
    OrderNotFoundError,
    ValidationError,
)
from storefront.models.order import ACTIVE_STATUSES, STATUS_PENDING, Order
from storefront.models.product import Product
from storefront.models.store import Store
from storefront.schemas.order import OrderCreate, OrderItem
from storefront.services.inventory_service import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    InventoryService,
    variant_key,
)
from storefront.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

ACTIVE_PRODUCT_STATUS = "Active"


def enters_active_status(
    new_status: str,
    previous_status: str | None,
    stored_status: str | None = None,
) -> bool:
    """Whether a status change should reduce inventory.

    Only entry into an active status from outside the active set counts. The
    previous status reported by the client and the status stored on the order
    are both checked, so an order that already reduced stock never does again.
    """
    if new_status not in ACTIVE_STATUSES:
        return False
    return previous_status not in ACTIVE_STATUSES and stored_status not in ACTIVE_STATUSES


class OrderService:
    """Business logic for orders."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        default_low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ) -> None:
        self.db = db
        self.inventory = InventoryService(db, default_threshold=default_low_stock_threshold)
        self.notifications = NotificationService(db)

    async def update_status(
        self,
        order_id: str,
        new_status: str,
        caller_id: str,
        previous_status: str | None = None,
    ) -> Order:
        """Change an order's status and run inventory side effects.

        Args:
            order_id: Order to update.
            new_status: Status to set; any string is accepted.
            caller_id: Authenticated user; must own the order's store.
            previous_status: Status the dashboard showed before the change.

        Raises:
            OrderNotFoundError: If the order does not exist.
            OrderAccessDeniedError: If the caller does not own the store.
        """
        order = await self.db.get(Order, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        if order.store_id != caller_id:
            raise OrderAccessDeniedError(order_id)

        stored_status = order.status
        order.status = new_status
        order.updated_at = datetime.now(UTC)
        await self.db.commit()

        logger.info(
            "Order %s status %s -> %s (reported previous: %s)",
            order_id,
            stored_status,
            new_status,
            previous_status,
        )

        if enters_active_status(new_status, previous_status, stored_status):
            alerts = await self.inventory.reduce_for_order(order)
            for alert in alerts:
                await self.notifications.create_low_stock_notification(alert)

        return order

    async def place_order(self, store: Store, data: OrderCreate) -> Order:
        """Create a pending order on ``store`` from a storefront checkout.

        Stock is not touched here; it is reduced when the merchant moves the
        order into processing or shipping.

        Raises:
            ValidationError: If an item names a product the store does not sell
                or a variant that does not exist.
        """
        items: list[OrderItem] = []
        total = 0.0

        for requested in data.items:
            product = await self.db.get(Product, requested.product_id)
            if (
                product is None
                or product.store_id != store.owner_id
                or product.status != ACTIVE_PRODUCT_STATUS
            ):
                raise ValidationError(f"Product {requested.product_id} is not available")

            if product.variant_stock is not None:
                if not requested.variant:
                    raise ValidationError(f"Please select a variant for {product.name}")
                if variant_key(requested.variant) not in product.variant_stock:
                    raise ValidationError(f"Variant not available for {product.name}")

            items.append(
                OrderItem(
                    product_id=product.id,
                    name=product.name,
                    quantity=requested.quantity,
                    price=product.price,
                    variant=requested.variant,
                )
            )
            total += product.price * requested.quantity

        order = Order(
            store_id=store.owner_id,
            customer_email=data.customer_email.lower(),
            customer_name=data.customer_name,
            items=[item.model_dump(by_alias=True, exclude_none=True) for item in items],
            total=round(total, 2),
            status=STATUS_PENDING,
        )
        self.db.add(order)
        await self.db.commit()

        logger.info("Order %s placed on store %s (%d items)", order.id, store.owner_id, len(items))
        return order

    async def list_orders(self, store_id: str, *, status: str | None = None) -> list[Order]:
        """Orders of ``store_id``, newest first."""
        stmt = select(Order).where(Order.store_id == store_id)
        if status:
            stmt = stmt.where(Order.status == status)
        result = await self.db.execute(stmt.order_by(Order.created_at.desc()))
        return list(result.scalars().all())
