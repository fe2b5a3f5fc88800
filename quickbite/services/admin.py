"""
Admin console services: dashboard, account management and catalog editing
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from quickbite.core.exceptions import NotFoundError, ValidationError
from quickbite.models.food import (
    MENU_CATEGORIES, RESTAURANT_CATEGORIES, RESTAURANT_FEATURES, SPICE_LEVELS, MenuItem, Restaurant
)
from quickbite.models.order import Order, OrderStatus
from quickbite.models.user import ROLES, Account, PendingSignup
from quickbite.services.orders import parse_status

logger = logging.getLogger(__name__)

RESTAURANT_REQUIRED = ("name", "description", "category", "delivery_time", "delivery_fee")
MENU_ITEM_REQUIRED = ("name", "description", "price", "category")


def dashboard_stats(db: Session) -> Dict[str, Any]:
    orders_by_status = {status.value: 0 for status in OrderStatus}
    for status, count in db.query(Order.status, func.count(Order.id)).group_by(Order.status).all():
        orders_by_status[status.value] = count

    revenue = (
        db.query(func.coalesce(func.sum(Order.total), 0.0))
        .filter(Order.status == OrderStatus.DELIVERED)
        .scalar()
    )

    return {
        "total_users": db.query(Account).count(),
        "verified_users": db.query(Account).filter(Account.is_verified.is_(True)).count(),
        "pending_signups": db.query(PendingSignup).count(),
        "total_restaurants": db.query(Restaurant).count(),
        "active_restaurants": db.query(Restaurant).filter(Restaurant.is_active.is_(True)).count(),
        "total_orders": sum(orders_by_status.values()),
        "orders_by_status": orders_by_status,
        "delivered_revenue": round(float(revenue or 0.0), 2),
    }


def list_accounts(db: Session, page: int = 1, limit: int = 20) -> Tuple[List[Account], int]:
    query = db.query(Account)
    total = query.count()
    accounts = query.order_by(Account.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return accounts, total


def _get_account(db: Session, account_id: str) -> Account:
    account = db.query(Account).filter(Account.id == account_id).first()
    if not account:
        raise NotFoundError("User not found")
    return account


def set_account_role(db: Session, acting: Account, account_id: str, role: Optional[str]) -> Account:
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}", field="role")
    if account_id == acting.id:
        raise ValidationError("You cannot change your own role", field="role")

    account = _get_account(db, account_id)
    account.role = role
    db.commit()
    db.refresh(account)
    logger.info(f"{acting.email} set role of {account.email} to {role}")
    return account


def delete_account(db: Session, acting: Account, account_id: str) -> None:
    """Hard delete; the account's orders and addresses go with it"""
    if account_id == acting.id:
        raise ValidationError("You cannot delete your own account")

    account = _get_account(db, account_id)
    db.delete(account)
    db.commit()
    logger.info(f"{acting.email} deleted account {account_id}")


def list_pending_signups(db: Session) -> List[PendingSignup]:
    return db.query(PendingSignup).order_by(PendingSignup.created_at.desc()).all()


def list_all_orders(db: Session, status: Optional[str] = None, page: int = 1,
                    limit: int = 20) -> Tuple[List[Order], int]:
    query = db.query(Order)
    status_filter = parse_status(status)
    if status_filter:
        query = query.filter(Order.status == status_filter)
    total = query.count()
    orders = query.order_by(Order.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return orders, total


# Catalog editing

def _check_non_negative(data: Dict[str, Any], *fields: str) -> None:
    for field in fields:
        value = data.get(field)
        if value is not None and value < 0:
            raise ValidationError(f"{field} must not be negative", field=field)


def _validate_restaurant(data: Dict[str, Any]) -> None:
    if "category" in data and data["category"] not in RESTAURANT_CATEGORIES:
        raise ValidationError(f"Unknown restaurant category: {data['category']}", field="category")
    unknown = [f for f in data.get("features") or [] if f not in RESTAURANT_FEATURES]
    if unknown:
        raise ValidationError(f"Unknown restaurant features: {', '.join(unknown)}", field="features")
    rating = data.get("rating")
    if rating is not None and not 0 <= rating <= 5:
        raise ValidationError("Rating must be between 0 and 5", field="rating")
    _check_non_negative(data, "delivery_fee", "minimum_order")


def _validate_menu_item(data: Dict[str, Any]) -> None:
    if "category" in data and data["category"] not in MENU_CATEGORIES:
        raise ValidationError(f"Unknown menu category: {data['category']}", field="category")
    if data.get("spice_level") is not None and data["spice_level"] not in SPICE_LEVELS:
        raise ValidationError(f"Spice level must be one of: {', '.join(SPICE_LEVELS)}", field="spice_level")
    _check_non_negative(data, "price")


def _require(data: Dict[str, Any], fields) -> None:
    for field in fields:
        if data.get(field) in (None, ""):
            raise ValidationError(f"{field} is required", field=field)


def create_restaurant(db: Session, data: Dict[str, Any]) -> Restaurant:
    data = {k: v for k, v in data.items() if v is not None}
    _require(data, RESTAURANT_REQUIRED)
    _validate_restaurant(data)

    restaurant = Restaurant(**data)
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    logger.info(f"Restaurant {restaurant.name} created")
    return restaurant


def update_restaurant(db: Session, restaurant_id: str, data: Dict[str, Any]) -> Restaurant:
    restaurant = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    if not restaurant:
        raise NotFoundError("Restaurant not found")

    data = {k: v for k, v in data.items() if v is not None}
    _validate_restaurant(data)
    for field, value in data.items():
        setattr(restaurant, field, value)

    db.commit()
    db.refresh(restaurant)
    return restaurant


def create_menu_item(db: Session, restaurant_id: str, data: Dict[str, Any]) -> MenuItem:
    restaurant = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    if not restaurant:
        raise NotFoundError("Restaurant not found")

    data = {k: v for k, v in data.items() if v is not None}
    _require(data, MENU_ITEM_REQUIRED)
    _validate_menu_item(data)

    item = MenuItem(restaurant_id=restaurant.id, **data)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_menu_item(db: Session, item_id: str, data: Dict[str, Any]) -> MenuItem:
    item = db.query(MenuItem).filter(MenuItem.id == item_id).first()
    if not item:
        raise NotFoundError("Menu item not found")

    data = {k: v for k, v in data.items() if v is not None}
    _validate_menu_item(data)

    new_price = data.pop("price", None)
    if new_price is not None and new_price != item.price:
        item.price = new_price
        item.price_version = (item.price_version or 1) + 1

    for field, value in data.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return item
