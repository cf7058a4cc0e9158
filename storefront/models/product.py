"""Product model with simple or per-variant stock."""

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, JSONType, new_id


class Product(Base):
    """A product listed by a store.

    Stock is tracked either as a scalar (``inventory``, mirrored into the legacy
    ``quantity`` field) or per variant in ``variant_stock``, keyed by the
    canonical variant key. A product never uses both.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)

    # Owner id of the store the product belongs to
    store_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    price: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="Active", nullable=False)
    images: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)

    # Simple stock; quantity is kept equal to inventory for older readers
    inventory: Mapped[int | None] = mapped_column(Integer, nullable=True)
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    low_stock_threshold: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Variant stock: variant key -> count, and optional per-variant thresholds
    variant_stock: Mapped[dict[str, int] | None] = mapped_column(JSONType, nullable=True)
    variant_low_stock_threshold: Mapped[dict[str, int] | None] = mapped_column(
        JSONType, nullable=True
    )

    # Lowercased emails waiting for a restock
    notify_when_available: Mapped[list[str]] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
    )

    # Units moved to fulfilment; drives the "popular" storefront sort
    sales_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Product {self.name} ({self.id})>"
