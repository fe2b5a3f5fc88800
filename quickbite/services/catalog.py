"""
Read access to restaurants and menus
"""
from typing import Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from quickbite.core.exceptions import NotFoundError
from quickbite.models.food import MenuItem, Restaurant


def _page(query, page: int, limit: int):
    return query.offset((page - 1) * limit).limit(limit).all()


def list_restaurants(db: Session, category: Optional[str] = None, min_rating: Optional[float] = None,
                     page: int = 1, limit: int = 20) -> Tuple[List[Restaurant], int]:
    """Active restaurants, best rated first"""
    query = db.query(Restaurant).filter(Restaurant.is_active.is_(True))

    if category:
        query = query.filter(Restaurant.category.ilike(f"%{category}%"))

    if min_rating is not None:
        query = query.filter(Restaurant.rating >= min_rating)

    total = query.count()
    restaurants = _page(query.order_by(Restaurant.rating.desc(), Restaurant.created_at.desc()), page, limit)
    return restaurants, total


def search_restaurants(db: Session, query_text: Optional[str] = None, category: Optional[str] = None,
                       page: int = 1, limit: int = 20) -> Tuple[List[Restaurant], int]:
    query = db.query(Restaurant).filter(Restaurant.is_active.is_(True))

    if query_text:
        pattern = f"%{query_text}%"
        query = query.filter(
            or_(
                Restaurant.name.ilike(pattern),
                Restaurant.description.ilike(pattern),
                Restaurant.category.ilike(pattern),
            )
        )

    if category:
        query = query.filter(Restaurant.category.ilike(f"%{category}%"))

    total = query.count()
    return _page(query.order_by(Restaurant.rating.desc()), page, limit), total


def list_categories(db: Session) -> List[str]:
    rows = (
        db.query(Restaurant.category)
        .filter(Restaurant.is_active.is_(True))
        .distinct()
        .all()
    )
    return sorted(row[0] for row in rows)


def get_restaurant(db: Session, restaurant_id: str) -> Restaurant:
    restaurant = (
        db.query(Restaurant)
        .filter(Restaurant.id == restaurant_id, Restaurant.is_active.is_(True))
        .first()
    )
    if not restaurant:
        raise NotFoundError("Restaurant not found")
    return restaurant


def get_menu(db: Session, restaurant_id: str, category: Optional[str] = None,
             page: int = 1, limit: int = 50) -> Tuple[Restaurant, Dict[str, List[MenuItem]], List[MenuItem], int]:
    """Available items of an active restaurant, grouped by category"""
    restaurant = get_restaurant(db, restaurant_id)

    query = db.query(MenuItem).filter(
        MenuItem.restaurant_id == restaurant.id,
        MenuItem.is_available.is_(True),
    )

    if category:
        query = query.filter(MenuItem.category.ilike(f"%{category}%"))

    total = query.count()
    items = _page(query.order_by(MenuItem.category.asc(), MenuItem.name.asc()), page, limit)

    grouped: Dict[str, List[MenuItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)

    return restaurant, grouped, items, total
