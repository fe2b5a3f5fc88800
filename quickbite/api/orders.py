"""
Orders API router
"""
from typing import Any, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Header, status
from sqlalchemy.orm import Session
from quickbite.api.auth import get_current_user
from quickbite.core.database import get_db
from quickbite.core.responses import envelope, normalize_paging, pagination_meta
from quickbite.models.order import OrderCreate, OrderReview, order_payload
from quickbite.models.user import Account
from quickbite.services import orders
from quickbite.services.notification_service import notification_service

router = APIRouter(prefix="/orders", tags=["orders"])

def send_order_confirmation(email: str, details: dict) -> None:
    """Background task; delivery failures are logged by the notification service"""
    notification_service.send_order_confirmation(email, details)

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    background_tasks: BackgroundTasks,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    current_user: Account = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Create a new order"""
    order = orders.create_order(
        db,
        current_user,
        restaurant_id=order_data.restaurant_id,
        items=[item.model_dump() for item in order_data.items] if order_data.items is not None else None,
        delivery_address=order_data.delivery_address.model_dump() if order_data.delivery_address else None,
        payment_method=order_data.payment_method,
        special_instructions=order_data.special_instructions,
        idempotency_key=idempotency_key,
    )

    background_tasks.add_task(
        send_order_confirmation,
        current_user.email,
        {"order_number": order.order_number, "restaurant_name": order.restaurant.name, "total": order.total},
    )

    return envelope(message="Order placed successfully", data=order_payload(order))

@router.get("")
async def get_user_orders(
    status: Optional[str] = None,
    page: Optional[int] = 1,
    limit: Optional[int] = 10,
    current_user: Account = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Get user's orders with optional filtering"""
    page, limit = normalize_paging(page, limit, default_limit=10)
    results, total = orders.list_orders(db, current_user, status=status, page=page, limit=limit)
    return envelope(
        data=[order_payload(o) for o in results],
        pagination=pagination_meta(page, limit, total),
    )

@router.get("/{order_id}")
async def get_order_details(
    order_id: str,
    current_user: Account = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Get detailed order information"""
    order = orders.get_order(db, current_user, order_id)
    return envelope(data=order_payload(order))

@router.patch("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    current_user: Account = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    order = orders.cancel_order(db, current_user, order_id)
    return envelope(message="Order cancelled successfully", data=order_payload(order))

@router.post("/{order_id}/review")
async def review_order(
    order_id: str,
    payload: OrderReview,
    current_user: Account = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    order = orders.rate_order(db, current_user, order_id, payload.rating, payload.review)
    return envelope(message="Review submitted successfully", data=order_payload(order))
