from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class LoyaltyPointsOut(BaseModel):
    customer_id: int
    loyalty_points: int


class AverageRatingOut(BaseModel):
    restaurant_id: int
    average_rating: Decimal


class DailyRevenueOut(BaseModel):
    restaurant_id: int
    day: date
    revenue: Decimal
