"""Dashboard notification endpoints."""

from fastapi import APIRouter, Query

from storefront.core.deps import CurrentUser, DBSession, get_user_id
from storefront.schemas.notification import NotificationListResponse, NotificationResponse
from storefront.services.notification_service import NotificationService

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    user: CurrentUser,
    db: DBSession,
    unread_only: bool = Query(False, alias="unreadOnly"),
) -> NotificationListResponse:
    """List the caller's notifications, newest first."""
    service = NotificationService(db)
    user_id = get_user_id(user)
    notifications = await service.list_for_user(user_id, unread_only=unread_only)
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in notifications],
        unread=await service.count_unread(user_id),
    )


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    user: CurrentUser,
    db: DBSession,
) -> NotificationResponse:
    """Mark one of the caller's notifications as read."""
    notification = await NotificationService(db).mark_read(get_user_id(user), notification_id)
    return NotificationResponse.model_validate(notification)
