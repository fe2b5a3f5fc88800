# tests/conftest.py
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SMTP_USERNAME"] = ""
os.environ["SMTP_PASSWORD"] = ""
os.environ["SEED_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient

from quickbite.core.database import SessionLocal, create_tables, drop_tables
from quickbite.core.security import get_password_hash
from quickbite.main import app
from quickbite.models.food import MenuItem, Restaurant
from quickbite.models.user import Account
from quickbite.services.accounts import issue_token

PASSWORD = "Secret@123"


@pytest.fixture(autouse=True)
def fresh_database():
    drop_tables()
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


class RecordingNotifier:
    """Stands in for the email service and remembers what was sent"""

    def __init__(self):
        self.otps = []
        self.welcomes = []

    def send_otp_email(self, email, otp_code, username):
        self.otps.append((email, otp_code))
        return {"sent": False, "method": "console", "message": "Signup successful. Check the server log for your OTP."}

    def send_welcome_email(self, email, username):
        self.welcomes.append(email)
        return True


@pytest.fixture
def notifier():
    return RecordingNotifier()


def make_account(db, username="alice", email="alice@example.com", mobile="+919876543210",
                 role="user", is_verified=True, password=PASSWORD):
    account = Account(
        username=username,
        email=email,
        mobile=mobile,
        password_hash=get_password_hash(password),
        role=role,
        is_verified=is_verified,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def make_restaurant(db, name="Pizza Palace", delivery_fee=45.0, minimum_order=200.0,
                    delivery_time="25-35 min", is_active=True, category="Italian", rating=4.5):
    restaurant = Restaurant(
        name=name,
        description=f"{name} description",
        category=category,
        rating=rating,
        delivery_time=delivery_time,
        delivery_fee=delivery_fee,
        minimum_order=minimum_order,
        is_active=is_active,
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


def make_menu_item(db, restaurant, name="Margherita Pizza", price=125.0, category="Pizza", is_available=True):
    item = MenuItem(
        restaurant_id=restaurant.id,
        name=name,
        description=f"{name} description",
        price=price,
        category=category,
        is_available=is_available,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def auth_headers(account):
    return {"Authorization": f"Bearer {issue_token(account)}"}


ADDRESS = {"street": "1 Main St", "city": "Mumbai", "state": "Maharashtra", "zip_code": "400001"}
