"""Stock reduction for fulfilled orders."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.order import Order
from storefront.models.product import Product
from storefront.schemas.order import OrderItem

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10


def variant_key(selection: Mapping[str, Any]) -> str:
    """Canonical stock-map key for a variant selection.

    Attributes are sorted by name and joined as ``name:value`` pairs with ``|``,
    so ``{"size": "M", "color": "red"}`` and ``{"color": "red", "size": "M"}``
    both map to ``"color:red|size:M"``.
    """
    return "|".join(f"{name}:{value}" for name, value in sorted(selection.items()))


def parse_variant_key(key: str) -> dict[str, str]:
    """Split a stored key back into a selection; the inverse of :func:`variant_key`.

    Raises:
        ValueError: If a part is not a ``name:value`` pair or an attribute repeats.
    """
    selection: dict[str, str] = {}
    for part in key.split("|"):
        name, sep, value = part.partition(":")
        name, value = name.strip(), value.strip()
        if not sep or not name or not value:
            raise ValueError(f"Invalid variant key {key!r}")
        if name in selection:
            raise ValueError(f"Variant key {key!r} repeats attribute {name!r}")
        selection[name] = value
    return selection


def canonical_variant_map(counts: Mapping[str, int]) -> dict[str, int]:
    """Re-key a merchant-supplied variant map with canonical variant keys.

    Raises:
        ValueError: If a key does not parse or two keys name the same variant.
    """
    canonical: dict[str, int] = {}
    for key, count in counts.items():
        normalized = variant_key(parse_variant_key(key))
        if normalized in canonical:
            raise ValueError(f"Variant {normalized!r} is listed more than once")
        canonical[normalized] = count
    return canonical


def resolve_threshold(
    product: Product,
    key: str | None,
    default: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> int:
    """Low-stock threshold for a product or one of its variants.

    A per-variant override wins over the product threshold, which wins over
    ``default``. Unset and zero values fall through to the next level.
    """
    if key is not None:
        override = (product.variant_low_stock_threshold or {}).get(key)
        if override:
            return int(override)
    return product.low_stock_threshold or default


def is_low_stock(stock: int, threshold: int) -> bool:
    # Zero is out of stock, which is not a low-stock condition.
    return 0 < stock <= threshold


@dataclass(frozen=True)
class LowStockAlert:
    """A low-stock condition detected while reducing inventory."""

    store_id: str
    product_id: str
    product_name: str
    variant_key: str | None
    remaining_stock: int


class InventoryService:
    """Applies an order's line items to product stock."""

    def __init__(
        self, db: AsyncSession, *, default_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    ) -> None:
        self.db = db
        self.default_threshold = default_threshold

    async def reduce_for_order(self, order: Order) -> list[LowStockAlert]:
        """Decrement stock for every line item of ``order``.

        All product writes are committed together; if any of them fails the
        whole batch is rolled back and the error propagates. Products that no
        longer exist are skipped.

        Returns:
            Low-stock conditions to report once the batch is committed.
        """
        alerts: list[LowStockAlert] = []
        try:
            for raw_item in order.items:
                item = OrderItem.model_validate(raw_item)
                product = await self.db.get(Product, item.product_id)
                if product is None:
                    logger.warning(
                        "Order %s references missing product %s", order.id, item.product_id
                    )
                    continue

                alert = self._apply(product, item, order.store_id)
                if alert is not None:
                    alerts.append(alert)

            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Error reducing inventory for order %s", order.id)
            raise

        logger.info(
            "Reduced inventory for order %s (%d items, %d low-stock alerts)",
            order.id,
            len(order.items),
            len(alerts),
        )
        return alerts

    def _apply(self, product: Product, item: OrderItem, store_id: str) -> LowStockAlert | None:
        key: str | None = None

        if item.variant is not None and product.variant_stock is not None:
            key = variant_key(item.variant)
            current = int(product.variant_stock.get(key) or 0)
            new_stock = max(0, current - item.quantity)
            # Reassign so the JSON column is flagged dirty
            product.variant_stock = {**product.variant_stock, key: new_stock}
        else:
            current = product.inventory or product.quantity or 0
            new_stock = max(0, current - item.quantity)
            product.inventory = new_stock
            product.quantity = new_stock

        product.sales_count = (product.sales_count or 0) + item.quantity

        threshold = resolve_threshold(product, key, self.default_threshold)
        if not is_low_stock(new_stock, threshold):
            return None

        return LowStockAlert(
            store_id=store_id,
            product_id=product.id,
            product_name=item.name or product.name,
            variant_key=key,
            remaining_stock=new_stock,
        )
