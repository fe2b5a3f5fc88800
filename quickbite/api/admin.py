"""
Admin console API router
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from quickbite.api.auth import require_admin, require_super_admin
from quickbite.core.database import get_db
from quickbite.core.responses import envelope, normalize_paging, pagination_meta
from quickbite.models.food import (
    MenuItemCreate, MenuItemOut, MenuItemUpdate, RestaurantCreate, RestaurantOut, RestaurantUpdate
)
from quickbite.models.order import OrderStatusUpdate, order_payload
from quickbite.models.user import Account, AccountOut, PendingSignupOut, RoleUpdate
from quickbite.services import admin, orders

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/dashboard")
async def dashboard(
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    return envelope(data=admin.dashboard_stats(db))

@router.get("/users")
async def list_users(
    page: Optional[int] = 1,
    limit: Optional[int] = 20,
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    page, limit = normalize_paging(page, limit, default_limit=20)
    accounts, total = admin.list_accounts(db, page=page, limit=limit)
    return envelope(
        data=[AccountOut.model_validate(a) for a in accounts],
        pagination=pagination_meta(page, limit, total),
    )

@router.patch("/users/{user_id}/role")
async def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    current_user: Account = Depends(require_super_admin),
    db: Session = Depends(get_db)
) -> Any:
    account = admin.set_account_role(db, current_user, user_id, payload.role)
    return envelope(message="Role updated successfully", data=AccountOut.model_validate(account))

@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    current_user: Account = Depends(require_super_admin),
    db: Session = Depends(get_db)
) -> Any:
    admin.delete_account(db, current_user, user_id)
    return envelope(message="User deleted successfully")

@router.get("/signup-requests")
async def list_signup_requests(
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """Pending signups awaiting verification; codes and hashes are never exposed"""
    pending = admin.list_pending_signups(db)
    return envelope(data=[PendingSignupOut.model_validate(p) for p in pending])

@router.get("/orders")
async def list_orders(
    status: Optional[str] = None,
    page: Optional[int] = 1,
    limit: Optional[int] = 20,
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    page, limit = normalize_paging(page, limit, default_limit=20)
    results, total = admin.list_all_orders(db, status=status, page=page, limit=limit)
    return envelope(
        data=[order_payload(o) for o in results],
        pagination=pagination_meta(page, limit, total),
    )

@router.patch("/orders/{order_id}/status")
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """Move an order to the next stage"""
    order = orders.advance_order_status(db, order_id, payload.status, payload.notes)
    return envelope(message="Order status updated", data=order_payload(order))

@router.post("/restaurants", status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    payload: RestaurantCreate,
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    restaurant = admin.create_restaurant(db, payload.model_dump(exclude_unset=True))
    return envelope(message="Restaurant created successfully", data=RestaurantOut.model_validate(restaurant))

@router.put("/restaurants/{restaurant_id}")
async def update_restaurant(
    restaurant_id: str,
    payload: RestaurantUpdate,
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    restaurant = admin.update_restaurant(db, restaurant_id, payload.model_dump(exclude_unset=True))
    return envelope(message="Restaurant updated successfully", data=RestaurantOut.model_validate(restaurant))

@router.post("/restaurants/{restaurant_id}/menu-items", status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    restaurant_id: str,
    payload: MenuItemCreate,
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    item = admin.create_menu_item(db, restaurant_id, payload.model_dump(exclude_unset=True))
    return envelope(message="Menu item created successfully", data=MenuItemOut.model_validate(item))

@router.put("/menu-items/{item_id}")
async def update_menu_item(
    item_id: str,
    payload: MenuItemUpdate,
    current_user: Account = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    item = admin.update_menu_item(db, item_id, payload.model_dump(exclude_unset=True))
    return envelope(message="Menu item updated successfully", data=MenuItemOut.model_validate(item))
