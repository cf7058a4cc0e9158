"""Notification schemas."""

from datetime import datetime

from storefront.schemas.common import BaseSchema


class NotificationResponse(BaseSchema):
    id: str
    user_id: str
    type: str
    product_id: str | None
    product_name: str | None
    variant_key: str | None
    remaining_stock: int | None
    message: str
    link: str | None
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseSchema):
    items: list[NotificationResponse]
    unread: int
