"""
Food catalog data models and API schemas
"""
from typing import Optional, List, Dict
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict, Field
from quickbite.core.database import Base, generate_id, utcnow

RESTAURANT_CATEGORIES = (
    "Indian",
    "Chinese",
    "Italian",
    "Mexican",
    "Thai",
    "American",
    "Japanese",
    "Mediterranean",
    "Fast Food",
    "Desserts",
    "Beverages",
)

RESTAURANT_FEATURES = (
    "Pure Veg",
    "Home Delivery",
    "Takeaway",
    "Card Payment",
    "Cash Payment",
)

MENU_CATEGORIES = (
    "Appetizers",
    "Main Course",
    "Desserts",
    "Beverages",
    "Breakfast",
    "Lunch",
    "Dinner",
    "Snacks",
    "Pizza",
    "Burgers",
    "Pasta",
    "Rice",
    "Noodles",
    "Salads",
    "Soups",
    "Sushi Rolls",
    "Tacos",
    "Bowls",
    "Curries",
    "Power Bowls",
)

SPICE_LEVELS = ("mild", "medium", "hot", "very_hot")

# Database Models

class Restaurant(Base):
    """Restaurant database model"""
    __tablename__ = "restaurants"

    id = Column(String(50), primary_key=True, index=True, default=generate_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String(500), default="")
    category = Column(String(50), nullable=False, index=True)
    rating = Column(Float, default=0.0, index=True)
    total_ratings = Column(Integer, default=0)
    delivery_time = Column(String(50), nullable=False)  # free text, e.g. "25-35 min"
    delivery_fee = Column(Float, nullable=False, default=0.0)
    minimum_order = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, default=True, index=True)

    # Location
    address = Column(Text)
    city = Column(String(100))
    state = Column(String(100))
    zip_code = Column(String(20))
    latitude = Column(Float)
    longitude = Column(Float)

    # Contact
    phone = Column(String(30))
    email = Column(String(255))

    # Timings
    opening_time = Column(String(10))
    closing_time = Column(String(10))
    is_open_24x7 = Column(Boolean, default=False)

    features = Column(JSON, default=list)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    menu_items = relationship("MenuItem", back_populates="restaurant", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="restaurant")

class MenuItem(Base):
    """Menu item database model"""
    __tablename__ = "menu_items"

    id = Column(String(50), primary_key=True, index=True, default=generate_id)
    restaurant_id = Column(String(50), ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    price_version = Column(Integer, default=1, nullable=False)
    image_url = Column(String(500), default="")
    category = Column(String(50), nullable=False, index=True)
    is_available = Column(Boolean, default=True, index=True)
    is_vegetarian = Column(Boolean, default=True)
    spice_level = Column(String(20), default="mild")
    preparation_time = Column(String(50), default="15-20 mins")
    nutrition_info = Column(JSON, default=dict)  # calories, protein, carbs, fat
    ingredients = Column(JSON, default=list)
    allergens = Column(JSON, default=list)
    tags = Column(JSON, default=list)
    rating = Column(Float, default=0.0)
    total_ratings = Column(Integer, default=0)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="menu_items")

# Pydantic Models for API

class RestaurantBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="image")
    category: Optional[str] = None
    rating: Optional[float] = None
    delivery_time: Optional[str] = Field(None, alias="deliveryTime")
    delivery_fee: Optional[float] = Field(None, alias="deliveryFee")
    minimum_order: Optional[float] = Field(None, alias="minimumOrder")
    is_active: Optional[bool] = Field(None, alias="isActive")
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    is_open_24x7: Optional[bool] = None
    features: Optional[List[str]] = None

class RestaurantCreate(RestaurantBase):
    pass

class RestaurantUpdate(RestaurantBase):
    pass

class RestaurantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    image_url: Optional[str] = None
    category: str
    rating: float = 0.0
    total_ratings: int = 0
    delivery_time: str
    delivery_fee: float
    minimum_order: float = 0.0
    is_active: bool = True
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    is_open_24x7: bool = False
    features: List[str] = []

class RestaurantSummary(BaseModel):
    """Restaurant fields embedded in order responses"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    image_url: Optional[str] = None
    category: str
    delivery_time: str

class MenuItemBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = Field(None, alias="image")
    category: Optional[str] = None
    is_available: Optional[bool] = Field(None, alias="isAvailable")
    is_vegetarian: Optional[bool] = Field(None, alias="isVeg")
    spice_level: Optional[str] = None
    preparation_time: Optional[str] = Field(None, alias="preparationTime")
    nutrition_info: Optional[Dict[str, float]] = Field(None, alias="nutritionalInfo")
    ingredients: Optional[List[str]] = None
    allergens: Optional[List[str]] = None
    tags: Optional[List[str]] = None

class MenuItemCreate(MenuItemBase):
    pass

class MenuItemUpdate(MenuItemBase):
    pass

class MenuItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    restaurant_id: str
    name: str
    description: str
    price: float
    price_version: int = 1
    image_url: Optional[str] = None
    category: str
    is_available: bool = True
    is_vegetarian: bool = True
    spice_level: Optional[str] = None
    preparation_time: Optional[str] = None
    nutrition_info: Dict[str, float] = {}
    ingredients: List[str] = []
    allergens: List[str] = []
    tags: List[str] = []
    rating: float = 0.0
    total_ratings: int = 0

class MenuItemSummary(BaseModel):
    """Menu item fields embedded in order line items"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: float
    image_url: Optional[str] = None
    category: str
