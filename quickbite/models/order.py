"""
Order management data models and API schemas
"""
import enum
from datetime import datetime
from typing import Optional, List, Dict, Any
from sqlalchemy import (
    Column, Integer, String, DateTime, Float, Text, JSON, ForeignKey, Enum, UniqueConstraint
)
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict, Field
from quickbite.core.database import Base, generate_id, utcnow
from quickbite.models.food import RestaurantSummary, MenuItemSummary

# Enums

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    WALLET = "wallet"

# Database Models

class Order(Base):
    """Order database model"""
    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("account_id", "idempotency_key", name="uq_orders_account_idempotency_key"),
    )

    id = Column(String(50), primary_key=True, index=True, default=generate_id)
    order_number = Column(String(32), unique=True, index=True, nullable=False)
    account_id = Column(String(50), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    restaurant_id = Column(String(50), ForeignKey("restaurants.id"), nullable=False, index=True)
    idempotency_key = Column(String(128))

    # Order details
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)
    status_history = Column(JSON, default=list)  # List of status change events

    # Pricing
    subtotal = Column(Float, nullable=False)
    delivery_fee = Column(Float, nullable=False)
    tax = Column(Float, nullable=False)
    discount = Column(Float, default=0.0, nullable=False)
    total = Column(Float, nullable=False)

    # Payment
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)

    # Delivery details
    delivery_address = Column(JSON, nullable=False)  # Snapshot, not a reference
    estimated_delivery_time = Column(DateTime)
    actual_delivery_time = Column(DateTime)
    notes = Column(Text)

    # Feedback
    rating = Column(Integer)
    review = Column(Text)
    rated_at = Column(DateTime)

    # Timestamps
    confirmed_at = Column(DateTime)
    preparing_at = Column(DateTime)
    ready_at = Column(DateTime)
    out_for_delivery_at = Column(DateTime)
    delivered_at = Column(DateTime)
    cancelled_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    account = relationship("Account", back_populates="orders")
    restaurant = relationship("Restaurant", back_populates="orders")
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.position"
    )

class OrderItem(Base):
    """Order line item; price is captured when the order is placed"""
    __tablename__ = "order_items"

    id = Column(String(50), primary_key=True, index=True, default=generate_id)
    order_id = Column(String(50), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(String(50), ForeignKey("menu_items.id"), nullable=False)
    position = Column(Integer, default=0, nullable=False)

    name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    price_version = Column(Integer, nullable=False, default=1)
    total_price = Column(Float, nullable=False)
    special_instructions = Column(Text)

    # Relationships
    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")

# Pydantic Models for API

class LineItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    menu_item_id: Optional[str] = Field(None, alias="menuItemId")
    quantity: Any = 1
    special_instructions: Optional[str] = Field(None, alias="specialInstructions")

class DeliveryAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")
    lat: Optional[float] = None
    lng: Optional[float] = None

class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    restaurant_id: Optional[str] = Field(None, alias="restaurantId")
    items: Optional[List[LineItemRequest]] = None
    delivery_address: Optional[DeliveryAddress] = Field(None, alias="deliveryAddress")
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    special_instructions: Optional[str] = Field(None, alias="specialInstructions")

class OrderReview(BaseModel):
    rating: Any = None
    review: Optional[str] = None

class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None

class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    menu_item_id: str
    name: str
    quantity: int
    unit_price: float
    price_version: int
    total_price: float
    special_instructions: Optional[str] = None
    menu_item: Optional[MenuItemSummary] = None

class PricingOut(BaseModel):
    subtotal: float
    delivery_fee: float
    tax: float
    discount: float
    total: float

class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: str
    account_id: str
    restaurant_id: str
    restaurant: Optional[RestaurantSummary] = None
    items: List[OrderItemOut] = []
    status: OrderStatus
    status_history: List[Dict[str, Any]] = []
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    subtotal: float
    delivery_fee: float
    tax: float
    discount: float
    total: float
    delivery_address: Dict[str, Any]
    estimated_delivery_time: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    review: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def pricing(self) -> PricingOut:
        return PricingOut(
            subtotal=self.subtotal,
            delivery_fee=self.delivery_fee,
            tax=self.tax,
            discount=self.discount,
            total=self.total,
        )

def order_payload(order: Order) -> Dict[str, Any]:
    """Serialize an order with restaurant and menu items expanded"""
    out = OrderOut.model_validate(order)
    data = out.model_dump(mode="json")
    data["pricing"] = out.pricing.model_dump(mode="json")
    return data
