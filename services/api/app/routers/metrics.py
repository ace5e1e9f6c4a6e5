from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from services.api.app.db.deps import get_db
from services.api.app.models.metrics import AverageRatingOut, DailyRevenueOut, LoyaltyPointsOut
from services.api.app.routers.errors import raise_engine_http_error
from services.api.app.services import metrics
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/customers/{customer_id}/loyalty-points", response_model=LoyaltyPointsOut)
def get_loyalty_points(customer_id: int, db: Session = Depends(get_db)) -> LoyaltyPointsOut:
    try:
        points = metrics.loyalty_points(db, customer_id)
    except Exception as e:
        raise_engine_http_error(e)

    return LoyaltyPointsOut(customer_id=customer_id, loyalty_points=points)


@router.get("/v1/restaurants/{restaurant_id}/rating", response_model=AverageRatingOut)
def get_average_rating(restaurant_id: int, db: Session = Depends(get_db)) -> AverageRatingOut:
    try:
        rating = metrics.average_rating(db, restaurant_id)
    except Exception as e:
        raise_engine_http_error(e)

    return AverageRatingOut(restaurant_id=restaurant_id, average_rating=rating)


@router.get("/v1/restaurants/{restaurant_id}/revenue", response_model=DailyRevenueOut)
def get_daily_revenue(
    restaurant_id: int, day: date, db: Session = Depends(get_db)
) -> DailyRevenueOut:
    try:
        revenue = metrics.daily_revenue(db, restaurant_id, day)
    except Exception as e:
        raise_engine_http_error(e)

    return DailyRevenueOut(restaurant_id=restaurant_id, day=day, revenue=revenue)
