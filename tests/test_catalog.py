# tests/test_catalog.py
import pytest

from quickbite.core.exceptions import NotFoundError
from quickbite.services import catalog

from conftest import make_menu_item, make_restaurant


def test_list_restaurants_hides_inactive_and_sorts_by_rating(db):
    make_restaurant(db, name="Burger Hub", category="American", rating=4.2)
    make_restaurant(db, name="Sushi Express", category="Japanese", rating=4.7)
    make_restaurant(db, name="Closed Diner", category="American", rating=5.0, is_active=False)

    restaurants, total = catalog.list_restaurants(db)

    assert total == 2
    assert [r.name for r in restaurants] == ["Sushi Express", "Burger Hub"]


def test_list_restaurants_filters(db):
    make_restaurant(db, name="Burger Hub", category="American", rating=4.2)
    make_restaurant(db, name="Sushi Express", category="Japanese", rating=4.7)
    make_restaurant(db, name="Pizza Palace", category="Italian", rating=3.9)

    restaurants, _ = catalog.list_restaurants(db, category="japan")
    assert [r.name for r in restaurants] == ["Sushi Express"]

    restaurants, total = catalog.list_restaurants(db, min_rating=4.0)
    assert total == 2
    assert {r.name for r in restaurants} == {"Burger Hub", "Sushi Express"}


def test_list_restaurants_paginates(db):
    for index in range(5):
        make_restaurant(db, name=f"Place {index}", rating=float(index))

    restaurants, total = catalog.list_restaurants(db, page=2, limit=2)

    assert total == 5
    assert [r.name for r in restaurants] == ["Place 2", "Place 1"]


def test_search_matches_name_description_or_category(db):
    make_restaurant(db, name="Burger Hub", category="American")
    make_restaurant(db, name="Sushi Express", category="Japanese")

    restaurants, total = catalog.search_restaurants(db, query_text="sushi")
    assert total == 1
    assert restaurants[0].name == "Sushi Express"

    restaurants, _ = catalog.search_restaurants(db, query_text="american")
    assert [r.name for r in restaurants] == ["Burger Hub"]


def test_categories_are_distinct_and_sorted(db):
    make_restaurant(db, name="A", category="Japanese")
    make_restaurant(db, name="B", category="American")
    make_restaurant(db, name="C", category="American")
    make_restaurant(db, name="D", category="Thai", is_active=False)

    assert catalog.list_categories(db) == ["American", "Japanese"]


def test_inactive_restaurant_is_not_found(db):
    restaurant = make_restaurant(db, is_active=False)

    with pytest.raises(NotFoundError):
        catalog.get_restaurant(db, restaurant.id)
    with pytest.raises(NotFoundError):
        catalog.get_menu(db, restaurant.id)


def test_menu_groups_available_items_by_category(db):
    restaurant = make_restaurant(db)
    make_menu_item(db, restaurant, name="Margherita Pizza", category="Pizza")
    make_menu_item(db, restaurant, name="Pepperoni Pizza", category="Pizza")
    make_menu_item(db, restaurant, name="Caesar Salad", category="Salads")
    make_menu_item(db, restaurant, name="Sold Out Soup", category="Soups", is_available=False)

    found, grouped, items, total = catalog.get_menu(db, restaurant.id)

    assert found.id == restaurant.id
    assert total == 3
    assert sorted(grouped) == ["Pizza", "Salads"]
    assert [i.name for i in grouped["Pizza"]] == ["Margherita Pizza", "Pepperoni Pizza"]
    assert len(items) == 3


def test_menu_category_filter(db):
    restaurant = make_restaurant(db)
    make_menu_item(db, restaurant, name="Margherita Pizza", category="Pizza")
    make_menu_item(db, restaurant, name="Caesar Salad", category="Salads")

    _, grouped, items, total = catalog.get_menu(db, restaurant.id, category="salad")

    assert total == 1
    assert list(grouped) == ["Salads"]
    assert items[0].name == "Caesar Salad"
