"""Order-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from storefront.schemas.common import EMAIL_PATTERN, BaseSchema


class OrderItem(BaseSchema):
    """A single line item as stored on the order."""

    product_id: str
    name: str = ""
    quantity: int = Field(..., ge=0)
    price: float = 0.0
    variant: dict[str, str] | None = None


class OrderItemCreate(BaseSchema):
    """A line item in a checkout request."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1, le=10000)
    variant: dict[str, str] | None = None


class OrderCreate(BaseSchema):
    """Checkout request placed by a customer on a storefront."""

    customer_email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    customer_name: str | None = Field(default=None, max_length=255)
    items: list[OrderItemCreate] = Field(..., min_length=1)


class OrderStatusUpdate(BaseSchema):
    """Status change requested from the dashboard.

    ``order_id`` and ``new_status`` are optional here so the route can answer a
    missing field with 400 rather than a schema error.
    """

    order_id: str | None = None
    new_status: str | None = None
    previous_status: str | None = None


class OrderResponse(BaseSchema):
    """Order as returned to the dashboard and the customer."""

    id: str
    store_id: str
    customer_email: str | None
    customer_name: str | None
    items: list[OrderItem]
    total: float
    status: str
    created_at: datetime
    updated_at: datetime
