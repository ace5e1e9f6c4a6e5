from __future__ import annotations

from fastapi import APIRouter, Depends
from services.api.app.db.deps import get_db
from services.api.app.models.catalog import (
    MenuItemOut,
    RestaurantOut,
    RestockRequest,
    RestockResponse,
)
from services.api.app.routers.errors import raise_engine_http_error
from services.api.app.services.lifecycle import list_restaurants, restaurant_menu
from services.api.app.services.restock import run_restock_sweep
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/restaurants", response_model=list[RestaurantOut])
def get_restaurants(db: Session = Depends(get_db)) -> list[RestaurantOut]:
    try:
        restaurants = list_restaurants(db)
    except Exception as e:
        raise_engine_http_error(e)

    return [
        RestaurantOut(id=r.id, name=r.name, cuisine_type=r.cuisine_type, rating=r.rating)
        for r in restaurants
    ]


@router.get("/v1/restaurants/{restaurant_id}/menu", response_model=list[MenuItemOut])
def get_menu(restaurant_id: int, db: Session = Depends(get_db)) -> list[MenuItemOut]:
    try:
        items = restaurant_menu(db, restaurant_id)
    except Exception as e:
        raise_engine_http_error(e)

    return [
        MenuItemOut(
            id=m.id,
            restaurant_id=m.restaurant_id,
            name=m.name,
            price=m.price,
            availability=m.availability,
        )
        for m in items
    ]


@router.post("/v1/catalog/restock", response_model=RestockResponse)
def restock(
    payload: RestockRequest | None = None, db: Session = Depends(get_db)
) -> RestockResponse:
    payload = payload or RestockRequest()
    try:
        result = run_restock_sweep(db, threshold=payload.threshold, quantity=payload.quantity)
    except Exception as e:
        raise_engine_http_error(e)

    return RestockResponse(
        qualifying=result.qualifying,
        restocked=result.restocked,
        failed_ids=result.failed_ids,
        skipped_ids=result.skipped_ids,
    )
