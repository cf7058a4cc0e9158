"""Dashboard order endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from storefront.core.deps import AppSettings, CurrentUser, DBSession, get_user_id
from storefront.schemas.common import SuccessResponse
from storefront.schemas.order import OrderResponse, OrderStatusUpdate
from storefront.services.order_service import OrderService

router = APIRouter()


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    user: CurrentUser,
    db: DBSession,
    order_status: str | None = Query(None, alias="status"),
) -> list[OrderResponse]:
    """List the caller's store orders, newest first."""
    service = OrderService(db)
    orders = await service.list_orders(get_user_id(user), status=order_status)
    return [OrderResponse.model_validate(order) for order in orders]


@router.patch("/update-status", response_model=SuccessResponse)
async def update_order_status(
    data: OrderStatusUpdate,
    user: CurrentUser,
    db: DBSession,
    settings: AppSettings,
) -> SuccessResponse:
    """Change an order's status.

    Moving an order into Processing or Shipped for the first time reduces stock
    for each line item and may raise low-stock notifications.
    """
    if not data.order_id or not data.new_status:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order ID and new status are required",
        )

    service = OrderService(db, default_low_stock_threshold=settings.default_low_stock_threshold)
    await service.update_status(
        data.order_id,
        data.new_status,
        caller_id=get_user_id(user),
        previous_status=data.previous_status,
    )
    return SuccessResponse(message="Order status updated successfully")
