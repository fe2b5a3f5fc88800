"""
Order pipeline: checkout validation, pricing and status transitions

Order status follows a fixed state machine:

    pending -> confirmed -> preparing -> ready -> out_for_delivery -> delivered

with `cancelled` reachable from `pending` or `confirmed` only. Line items
keep the unit price (and catalog price version) seen at checkout; they are
never re-priced from the live catalog.
"""
import logging
import re
import secrets
import time
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quickbite.core.config import settings
from quickbite.core.database import utcnow
from quickbite.core.exceptions import (
    AlreadyRatedError,
    BelowMinimumOrderError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from quickbite.models.food import MenuItem, Restaurant
from quickbite.models.order import Order, OrderItem, OrderStatus, PaymentMethod, PaymentStatus
from quickbite.models.user import Account

logger = logging.getLogger(__name__)

TAX_RATE = 0.18
DELIVERY_BUFFER_MINUTES = 10
MAX_LINE_QUANTITY = 999
REQUIRED_ADDRESS_FIELDS = ("street", "city", "state", "zip_code")

ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY},
    OrderStatus.READY: {OrderStatus.OUT_FOR_DELIVERY},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

CANCELLABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED)

STATUS_TIMESTAMPS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.PREPARING: "preparing_at",
    OrderStatus.READY: "ready_at",
    OrderStatus.OUT_FOR_DELIVERY: "out_for_delivery_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


def compute_pricing(subtotal: float, delivery_fee: float, discount: float = 0.0) -> Dict[str, float]:
    """Price breakdown in currency units, rounded to cents"""
    subtotal = round(subtotal, 2)
    tax = round(subtotal * TAX_RATE, 2)
    total = round(subtotal + delivery_fee + tax - discount, 2)
    return {
        "subtotal": subtotal,
        "delivery_fee": delivery_fee,
        "tax": tax,
        "discount": discount,
        "total": total,
    }


def parse_delivery_minutes(delivery_time: Optional[str]) -> int:
    """Lower bound of a free-text delivery window such as "25-35 min"."""
    match = re.search(r"\d+", delivery_time or "")
    if not match:
        logger.warning(
            f"Unparseable delivery time {delivery_time!r}, using {settings.DEFAULT_DELIVERY_MINUTES} minutes"
        )
        return settings.DEFAULT_DELIVERY_MINUTES
    return int(match.group(0))


def estimate_delivery_time(restaurant: Restaurant, now: Optional[datetime] = None) -> datetime:
    minutes = parse_delivery_minutes(restaurant.delivery_time) + DELIVERY_BUFFER_MINUTES
    return (now or utcnow()) + timedelta(minutes=minutes)


def generate_order_number() -> str:
    return f"QB{int(time.time() * 1000)}{secrets.randbelow(1000):03d}"


def _unique_order_number(db: Session) -> str:
    while True:
        number = generate_order_number()
        if not db.query(Order.id).filter(Order.order_number == number).first():
            return number


def _status_event(status: OrderStatus, notes: str, now: datetime) -> Dict[str, Any]:
    return {"status": status.value, "timestamp": now.isoformat(), "notes": notes}


def _append_history(order: Order, event: Dict[str, Any]) -> None:
    # JSON columns only detect reassignment
    order.status_history = [*(order.status_history or []), event]


def _whole_number(value: Any, low: int, high: int) -> int:
    """Coerce an int, integral float or digit string within [low, high]; raises ValueError otherwise"""
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or not low <= value <= high:
        raise ValueError(value)
    return value


def _normalize_lines(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    lines = []
    for index, item in enumerate(items):
        menu_item_id = item.get("menu_item_id")
        if not menu_item_id:
            raise ValidationError(f"Item {index + 1} is missing a menu item id", field="items")
        try:
            quantity = _whole_number(item.get("quantity", 1), 1, MAX_LINE_QUANTITY)
        except ValueError:
            raise ValidationError(
                f"Quantity must be a whole number between 1 and {MAX_LINE_QUANTITY} for item {menu_item_id}",
                field="items",
            )
        lines.append({
            "menu_item_id": menu_item_id,
            "quantity": quantity,
            "special_instructions": item.get("special_instructions"),
        })
    return lines


def _normalize_address(address: Dict[str, Any]) -> Dict[str, Any]:
    missing = [name for name in REQUIRED_ADDRESS_FIELDS if not address.get(name)]
    if missing:
        raise ValidationError(f"Delivery address is missing: {', '.join(missing)}", field="delivery_address")
    snapshot = {name: address[name] for name in REQUIRED_ADDRESS_FIELDS}
    if address.get("lat") is not None and address.get("lng") is not None:
        snapshot["coordinates"] = {"lat": address["lat"], "lng": address["lng"]}
    return snapshot


def _claim_idempotency_key(db: Session, account: Account, key: str, now: datetime) -> None:
    existing = (
        db.query(Order)
        .filter(Order.account_id == account.id, Order.idempotency_key == key)
        .first()
    )
    if not existing:
        return
    window_start = now - timedelta(hours=settings.ORDER_IDEMPOTENCY_WINDOW_HOURS)
    if existing.created_at and existing.created_at >= window_start:
        raise ConflictError(
            f"Duplicate order submission, already placed as {existing.order_number}",
            field="idempotency_key",
        )
    # Expired keys may be reused
    existing.idempotency_key = None
    db.flush()


def create_order(db: Session, account: Account, restaurant_id: Optional[str],
                 items: Optional[List[Dict[str, Any]]], delivery_address: Optional[Dict[str, Any]],
                 payment_method: Optional[str], special_instructions: Optional[str] = None,
                 idempotency_key: Optional[str] = None) -> Order:
    """Validate a checkout against the catalog, price it and persist the order"""
    if not restaurant_id or items is None or not delivery_address or not payment_method:
        raise ValidationError("Restaurant, items, delivery address, and payment method are required")
    if not items:
        raise ValidationError("Order must contain at least one item", field="items")
    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        raise ValidationError(f"Unsupported payment method: {payment_method}", field="payment_method")
    lines = _normalize_lines(items)
    address = _normalize_address(delivery_address)

    now = utcnow()
    if idempotency_key:
        _claim_idempotency_key(db, account, idempotency_key, now)

    restaurant = (
        db.query(Restaurant)
        .filter(Restaurant.id == restaurant_id, Restaurant.is_active.is_(True))
        .first()
    )
    if not restaurant:
        raise NotFoundError("Restaurant not found or inactive")

    subtotal = 0.0
    order_items = []
    for position, line in enumerate(lines):
        menu_item = (
            db.query(MenuItem)
            .filter(
                MenuItem.id == line["menu_item_id"],
                MenuItem.restaurant_id == restaurant.id,
                MenuItem.is_available.is_(True),
            )
            .first()
        )
        if not menu_item:
            raise NotFoundError(f"Menu item not found or unavailable: {line['menu_item_id']}", field="items")

        line_total = menu_item.price * line["quantity"]
        subtotal += line_total
        order_items.append(OrderItem(
            menu_item_id=menu_item.id,
            position=position,
            name=menu_item.name,
            quantity=line["quantity"],
            unit_price=menu_item.price,
            price_version=menu_item.price_version,
            total_price=round(line_total, 2),
            special_instructions=line["special_instructions"],
        ))

    pricing = compute_pricing(subtotal, restaurant.delivery_fee)

    if pricing["subtotal"] < restaurant.minimum_order:
        raise BelowMinimumOrderError(f"Minimum order amount is {restaurant.minimum_order:.2f}")

    order = Order(
        order_number=_unique_order_number(db),
        account_id=account.id,
        restaurant_id=restaurant.id,
        idempotency_key=idempotency_key,
        status=OrderStatus.PENDING,
        status_history=[_status_event(OrderStatus.PENDING, "Order placed successfully", now)],
        payment_method=method,
        payment_status=PaymentStatus.PENDING,
        delivery_address=address,
        estimated_delivery_time=estimate_delivery_time(restaurant, now),
        notes=special_instructions,
        items=order_items,
        created_at=now,
        **pricing,
    )
    db.add(order)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Duplicate order submission", field="idempotency_key")
    db.refresh(order)
    logger.info(f"Order {order.order_number} placed by {account.id} for {pricing['total']:.2f}")
    return order


def parse_status(value: Optional[str]) -> Optional[OrderStatus]:
    if not value:
        return None
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown order status: {value}", field="status")


def list_orders(db: Session, account: Account, status: Optional[str] = None,
                page: int = 1, limit: int = 10) -> Tuple[List[Order], int]:
    query = db.query(Order).filter(Order.account_id == account.id)

    status_filter = parse_status(status)
    if status_filter:
        query = query.filter(Order.status == status_filter)

    total = query.count()
    orders = (
        query.order_by(Order.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return orders, total


def get_order(db: Session, account: Account, order_id: str) -> Order:
    """Orders of other accounts are reported as missing"""
    order = (
        db.query(Order)
        .filter(Order.id == order_id, Order.account_id == account.id)
        .first()
    )
    if not order:
        raise NotFoundError("Order not found")
    return order


def _apply_transition(order: Order, new_status: OrderStatus, notes: str, now: datetime) -> None:
    order.status = new_status
    setattr(order, STATUS_TIMESTAMPS[new_status], now)
    if new_status == OrderStatus.DELIVERED:
        order.actual_delivery_time = now
    if new_status == OrderStatus.CANCELLED and order.payment_status == PaymentStatus.PAID:
        order.payment_status = PaymentStatus.REFUNDED
    _append_history(order, _status_event(new_status, notes, now))


def cancel_order(db: Session, account: Account, order_id: str) -> Order:
    order = get_order(db, account, order_id)

    if order.status not in CANCELLABLE_STATUSES:
        raise InvalidStateError("Order cannot be cancelled at this stage")

    _apply_transition(order, OrderStatus.CANCELLED, "Cancelled by customer", utcnow())
    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.order_number} cancelled by customer")
    return order


def rate_order(db: Session, account: Account, order_id: str, rating: Any, review: Optional[str] = None) -> Order:
    try:
        rating = _whole_number(rating, 1, 5)
    except ValueError:
        raise ValidationError("Rating must be a whole number between 1 and 5", field="rating")

    order = (
        db.query(Order)
        .filter(
            Order.id == order_id,
            Order.account_id == account.id,
            Order.status == OrderStatus.DELIVERED,
        )
        .first()
    )
    if not order:
        raise NotFoundError("Order not found or not delivered")

    if order.rating is not None:
        raise AlreadyRatedError()

    order.rating = rating
    order.review = review
    order.rated_at = utcnow()
    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.order_number} rated {order.rating}")
    return order


def advance_order_status(db: Session, order_id: str, new_status: Optional[str], notes: Optional[str] = None) -> Order:
    """Move an order along the state machine (admin console)"""
    target = parse_status(new_status)
    if not target:
        raise ValidationError("Status is required", field="status")

    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")

    if target not in ORDER_TRANSITIONS[order.status]:
        raise InvalidStateError(
            f"Cannot change order status from {order.status.value} to {target.value}"
        )

    previous = order.status
    _apply_transition(
        order, target, notes or f"Status changed from {previous.value} to {target.value}", utcnow()
    )
    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.order_number} moved from {previous.value} to {target.value}")
    return order
