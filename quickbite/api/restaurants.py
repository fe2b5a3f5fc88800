"""
Restaurant catalog API router
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from quickbite.api.auth import get_optional_user
from quickbite.core.database import get_db
from quickbite.core.responses import envelope, normalize_paging, pagination_meta
from quickbite.models.food import MenuItemOut, RestaurantOut
from quickbite.models.user import Account
from quickbite.services import catalog

router = APIRouter(prefix="/restaurants", tags=["restaurants"])

@router.get("")
async def list_restaurants(
    category: Optional[str] = None,
    rating: Optional[float] = None,
    page: Optional[int] = 1,
    limit: Optional[int] = 20,
    db: Session = Depends(get_db),
    current_user: Optional[Account] = Depends(get_optional_user)
) -> Any:
    """Browse active restaurants"""
    page, limit = normalize_paging(page, limit, default_limit=20)
    restaurants, total = catalog.list_restaurants(db, category=category, min_rating=rating, page=page, limit=limit)
    return envelope(
        data=[RestaurantOut.model_validate(r) for r in restaurants],
        pagination=pagination_meta(page, limit, total),
    )

@router.get("/search")
async def search_restaurants(
    query: Optional[str] = None,
    category: Optional[str] = None,
    page: Optional[int] = 1,
    limit: Optional[int] = 20,
    db: Session = Depends(get_db),
    current_user: Optional[Account] = Depends(get_optional_user)
) -> Any:
    """Search restaurants by name, description or category"""
    page, limit = normalize_paging(page, limit, default_limit=20)
    restaurants, total = catalog.search_restaurants(db, query_text=query, category=category, page=page, limit=limit)
    return envelope(
        data=[RestaurantOut.model_validate(r) for r in restaurants],
        pagination=pagination_meta(page, limit, total),
    )

@router.get("/categories")
async def get_categories(db: Session = Depends(get_db)) -> Any:
    return envelope(data=catalog.list_categories(db))

@router.get("/{restaurant_id}")
async def get_restaurant_details(
    restaurant_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[Account] = Depends(get_optional_user)
) -> Any:
    """Get detailed restaurant information"""
    restaurant = catalog.get_restaurant(db, restaurant_id)
    return envelope(data=RestaurantOut.model_validate(restaurant))

@router.get("/{restaurant_id}/menu")
async def get_restaurant_menu(
    restaurant_id: str,
    category: Optional[str] = None,
    page: Optional[int] = 1,
    limit: Optional[int] = 50,
    db: Session = Depends(get_db),
    current_user: Optional[Account] = Depends(get_optional_user)
) -> Any:
    """Get restaurant menu grouped by category"""
    page, limit = normalize_paging(page, limit, default_limit=50)
    restaurant, grouped, items, total = catalog.get_menu(
        db, restaurant_id, category=category, page=page, limit=limit
    )
    return envelope(
        data={
            "restaurant": restaurant.name,
            "restaurant_id": restaurant.id,
            "menu": {
                name: [MenuItemOut.model_validate(i) for i in group]
                for name, group in grouped.items()
            },
            "items": [MenuItemOut.model_validate(i) for i in items],
        },
        pagination=pagination_meta(page, limit, total),
    )
