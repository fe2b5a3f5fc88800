# tests/test_seed.py
from types import SimpleNamespace

from quickbite.models.food import MenuItem, Restaurant
from quickbite.models.user import Account
from quickbite.seed import seed_admin, seed_catalog
from quickbite.services import catalog


def admin_config(**overrides):
    values = dict(
        SEED_ADMIN_USERNAME="admin",
        SEED_ADMIN_EMAIL="Admin@QuickBite.app",
        SEED_ADMIN_PASSWORD="Admin@1234",
        SEED_ADMIN_MOBILE="+919800000000",
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_seed_catalog_once(db):
    assert seed_catalog(db) == 3
    assert seed_catalog(db) == 0

    assert db.query(Restaurant).count() == 3
    assert db.query(MenuItem).count() == 9
    assert catalog.list_categories(db) == ["American", "Italian", "Japanese"]

    pizza_palace = db.query(Restaurant).filter(Restaurant.name == "Pizza Palace").one()
    assert pizza_palace.delivery_fee == 49
    assert pizza_palace.minimum_order == 199


def test_seed_admin(db):
    assert not seed_admin(db, admin_config(SEED_ADMIN_EMAIL=""))
    assert seed_admin(db, admin_config())
    assert not seed_admin(db, admin_config())

    admin = db.query(Account).one()
    assert admin.email == "admin@quickbite.app"
    assert admin.role == "super_admin"
    assert admin.is_verified
