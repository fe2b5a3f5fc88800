"""
Database setup and sample catalog seeding

Usage: quickbite-seed [--reset]
"""
import argparse
import logging
from sqlalchemy.orm import Session
from quickbite.core.config import settings
from quickbite.core.database import SessionLocal, create_tables, drop_tables
from quickbite.core.security import get_password_hash
from quickbite.models.food import MenuItem, Restaurant
from quickbite.models.user import Account

logger = logging.getLogger(__name__)

SAMPLE_CATALOG = [
    {
        "restaurant": {
            "name": "Pizza Palace",
            "description": "Authentic Italian pizzas made with fresh ingredients",
            "category": "Italian",
            "rating": 4.5,
            "delivery_time": "25-35 min",
            "delivery_fee": 49,
            "minimum_order": 199,
            "address": "123 Food Street",
            "city": "Mumbai",
            "state": "Maharashtra",
            "zip_code": "400001",
            "phone": "+91 9876543210",
            "email": "info@pizzapalace.com",
            "opening_time": "10:00",
            "closing_time": "23:00",
            "features": ["Pure Veg", "Home Delivery", "Card Payment"],
        },
        "menu": [
            {"name": "Margherita Pizza", "description": "Classic tomato, mozzarella, and basil",
             "price": 299, "category": "Pizza", "is_vegetarian": True},
            {"name": "Pepperoni Pizza", "description": "Pepperoni with mozzarella cheese",
             "price": 399, "category": "Pizza", "is_vegetarian": False},
            {"name": "Caesar Salad", "description": "Fresh romaine with caesar dressing",
             "price": 199, "category": "Salads", "is_vegetarian": True},
        ],
    },
    {
        "restaurant": {
            "name": "Burger Hub",
            "description": "Gourmet burgers and crispy fries",
            "category": "American",
            "rating": 4.2,
            "delivery_time": "20-30 min",
            "delivery_fee": 29,
            "minimum_order": 149,
            "address": "456 Fast Lane",
            "city": "Mumbai",
            "state": "Maharashtra",
            "zip_code": "400002",
            "phone": "+91 9876543211",
            "email": "info@burgerhub.com",
            "opening_time": "11:00",
            "closing_time": "24:00",
            "features": ["Home Delivery", "Takeaway", "Cash Payment"],
        },
        "menu": [
            {"name": "Classic Burger", "description": "Beef patty with lettuce, tomato, onion",
             "price": 249, "category": "Burgers", "is_vegetarian": False},
            {"name": "Chicken Burger", "description": "Grilled chicken breast with avocado",
             "price": 279, "category": "Burgers", "is_vegetarian": False},
            {"name": "French Fries", "description": "Crispy golden fries",
             "price": 99, "category": "Snacks", "is_vegetarian": True},
        ],
    },
    {
        "restaurant": {
            "name": "Sushi Express",
            "description": "Fresh sushi and Japanese cuisine",
            "category": "Japanese",
            "rating": 4.7,
            "delivery_time": "30-40 min",
            "delivery_fee": 59,
            "minimum_order": 299,
            "address": "789 Sushi Street",
            "city": "Mumbai",
            "state": "Maharashtra",
            "zip_code": "400003",
            "phone": "+91 9876543212",
            "email": "info@sushiexpress.com",
            "opening_time": "12:00",
            "closing_time": "22:00",
            "features": ["Home Delivery", "Card Payment"],
        },
        "menu": [
            {"name": "California Roll", "description": "Crab, avocado, cucumber",
             "price": 399, "category": "Sushi Rolls", "is_vegetarian": False},
            {"name": "Salmon Sashimi", "description": "Fresh salmon slices",
             "price": 599, "category": "Sushi Rolls", "is_vegetarian": False},
            {"name": "Miso Soup", "description": "Traditional soybean soup",
             "price": 149, "category": "Soups", "is_vegetarian": True},
        ],
    },
]

def seed_catalog(db: Session) -> int:
    """Insert the sample restaurants and menus when the catalog is empty"""
    if db.query(Restaurant).first():
        logger.info("Catalog already populated, skipping sample data")
        return 0

    for entry in SAMPLE_CATALOG:
        restaurant = Restaurant(**entry["restaurant"])
        restaurant.menu_items = [MenuItem(**item) for item in entry["menu"]]
        db.add(restaurant)

    db.commit()
    logger.info(f"Seeded {len(SAMPLE_CATALOG)} sample restaurants")
    return len(SAMPLE_CATALOG)

def seed_admin(db: Session, config=settings) -> bool:
    """Create the super admin account described by the SEED_ADMIN_* settings"""
    if not (config.SEED_ADMIN_EMAIL and config.SEED_ADMIN_PASSWORD):
        logger.info("SEED_ADMIN_EMAIL/SEED_ADMIN_PASSWORD not set, skipping admin account")
        return False

    email = config.SEED_ADMIN_EMAIL.strip().lower()
    if db.query(Account).filter(Account.email == email).first():
        logger.info(f"Admin account {email} already exists")
        return False

    db.add(Account(
        username=config.SEED_ADMIN_USERNAME,
        email=email,
        password_hash=get_password_hash(config.SEED_ADMIN_PASSWORD),
        mobile=config.SEED_ADMIN_MOBILE or "+910000000000",
        is_verified=True,
        role="super_admin",
    ))
    db.commit()
    logger.info(f"Admin account {email} created")
    return True

def main(argv=None):
    parser = argparse.ArgumentParser(description="Create QuickBite tables and seed sample data")
    parser.add_argument("--reset", action="store_true", help="drop all tables before seeding")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)

    if args.reset:
        drop_tables()
        print("Dropped all tables")
    create_tables()
    print("Database tables created successfully!")

    db = SessionLocal()
    try:
        restaurants = seed_catalog(db)
        admin_created = seed_admin(db)
    finally:
        db.close()

    print(f"Sample restaurants added: {restaurants}")
    print(f"Admin account created: {'yes' if admin_created else 'no'}")

if __name__ == "__main__":
    main()
