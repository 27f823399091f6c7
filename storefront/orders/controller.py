from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from ..api.deps import CatalogCache
from ..auth.service import CurrentUser, CurrentAdmin
from ..core.config import settings
from ..core.exceptions import OrderNotFoundError, PaymentModeUnavailableError
from ..database.core import get_db
from ..schemas.orders import (
    PlaceOrderRequest, PlaceOrderResponse, OrderResponse,
    OrderListResponse, OrderStatusUpdate
)
from .service import OrderService

router = APIRouter(prefix="/orders")

@router.post("/", response_model=PlaceOrderResponse, status_code=status.HTTP_201_CREATED)
async def place_order(
    order_data: PlaceOrderRequest,
    current_user: CurrentUser,
    cache: CatalogCache,
    db: Session = Depends(get_db)
):
    """Place an order from the authenticated user's cart"""
    if order_data.payment_mode not in settings.ENABLED_PAYMENT_MODES:
        raise PaymentModeUnavailableError(order_data.payment_mode, settings.ENABLED_PAYMENT_MODES)

    order_id = await OrderService.place_order(
        db,
        current_user.user_id,
        order_data.address_id,
        order_data.payment_mode,
        cache=cache
    )
    return PlaceOrderResponse(order_id=order_id)

@router.get("/", response_model=OrderListResponse)
async def get_user_orders(
    current_user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Get all orders for the authenticated user with pagination"""
    orders = await OrderService.get_user_orders(db, current_user.user_id, skip, limit)
    total = await OrderService.count_user_orders(db, current_user.user_id)
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        skip=skip,
        limit=limit
    )

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    current_user: CurrentUser,
    db: Session = Depends(get_db)
):
    """Get a specific order by ID (user can only see their own orders)"""
    order = await OrderService.get_order_by_id(db, order_id, current_user.user_id)
    if not order:
        raise OrderNotFoundError(order_id)
    return OrderResponse.model_validate(order)

@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    status_update: OrderStatusUpdate,
    current_admin: CurrentAdmin,
    db: Session = Depends(get_db)
):
    """Update order status (admin console)"""
    order = await OrderService.update_order_status(db, order_id, status_update.status)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return OrderResponse.model_validate(order)
