"""Order model."""

from typing import Any

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, JSONType, new_id

STATUS_PENDING = "Pending"
STATUS_PROCESSING = "Processing"
STATUS_SHIPPED = "Shipped"

# Statuses that have already triggered inventory reduction
ACTIVE_STATUSES = frozenset({STATUS_PROCESSING, STATUS_SHIPPED})


class Order(Base):
    """A customer order placed on a storefront.

    ``status`` is a free-form string set by the merchant; only entry into
    ``ACTIVE_STATUSES`` has side effects. ``items`` holds line items as stored
    documents: ``{"productId", "name", "quantity", "price", "variant"}``.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)

    # Owner id of the store the order was placed with
    store_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    items: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list, nullable=False)
    total: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    status: Mapped[str] = mapped_column(String(50), default=STATUS_PENDING, nullable=False)

    def __repr__(self) -> str:
        return f"<Order {self.id} ({self.status})>"
