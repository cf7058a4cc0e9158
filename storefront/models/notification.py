"""Dashboard notification model."""

import enum

from sqlalchemy import Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, new_id


class NotificationType(str, enum.Enum):
    """Kinds of merchant notifications."""

    LOW_STOCK_PRODUCT = "LOW_STOCK_PRODUCT"
    LOW_STOCK_VARIANT = "LOW_STOCK_VARIANT"


class Notification(Base):
    """A notification shown on the merchant dashboard.

    At most one unread notification exists per (user, product, type); this is
    checked before insert rather than enforced by a constraint.
    """

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)

    # Recipient; equal to the store id (owner id)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    store_id: Mapped[str] = mapped_column(String(255), nullable=False)

    type: Mapped[str] = mapped_column(String(50), nullable=False)
    product_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    product_name: Mapped[str | None] = mapped_column(String(500), nullable=True)
    variant_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
    remaining_stock: Mapped[int | None] = mapped_column(Integer, nullable=True)

    message: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index(
            "ix_notifications_user_product_type",
            "user_id",
            "product_id",
            "type",
        ),
    )

    def __repr__(self) -> str:
        return f"<Notification {self.type} ({self.product_id})>"
