from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class MenuItemOut(BaseModel):
    id: int
    restaurant_id: int
    name: str
    price: Decimal
    availability: int


class RestockRequest(BaseModel):
    threshold: int | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=0)


class RestockResponse(BaseModel):
    qualifying: int
    restocked: int
    failed_ids: list[int] = Field(default_factory=list)
    skipped_ids: list[int] = Field(default_factory=list)


class RestaurantOut(BaseModel):
    id: int
    name: str
    cuisine_type: str | None = None
    rating: Decimal
