from __future__ import annotations

from decimal import Decimal

from packages.shared.schemas.order_v1 import OrderStatusV1, PaymentResultV1, PaymentStatusV1
from pydantic import BaseModel, ConfigDict, Field


class PlaceOrderRequest(BaseModel):
    # Extra keys are kept so derived-field writes can be rejected explicitly.
    model_config = ConfigDict(extra="allow")

    customer_id: int
    restaurant_id: int
    address_id: int


class PlaceOrderResponse(BaseModel):
    order_id: int


class LineItemRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    menu_item_id: int
    quantity: int = Field(..., ge=0)
    # Defaults to the menu item's current price.
    unit_price: Decimal | None = Field(default=None, ge=0)


class OrderItemOut(BaseModel):
    id: int
    menu_item_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderOut(BaseModel):
    id: int
    customer_id: int
    restaurant_id: int
    address_id: int
    order_date: str
    status: OrderStatusV1
    amount: Decimal
    payment_status: PaymentStatusV1
    items: list[OrderItemOut] = Field(default_factory=list)


class OrderSummary(BaseModel):
    id: int
    restaurant_id: int
    order_date: str
    status: OrderStatusV1
    amount: Decimal
    payment_status: PaymentStatusV1


class PaymentRequest(BaseModel):
    amount: Decimal = Field(..., ge=0)
    method: str | None = None


class PaymentResponse(BaseModel):
    payment_id: int
    order_id: int
    payment_status: PaymentStatusV1
    gateway: str
    reference_id: str


class OrderStatusRequest(BaseModel):
    # Plain string so unknown values reach the engine and come back as its own error.
    status: str


class OrderOverview(BaseModel):
    id: int
    customer_id: int
    restaurant_id: int
    amount: Decimal
    items_count: int


class OwnerOrderSummary(BaseModel):
    id: int
    restaurant_id: int
    customer_name: str
    order_date: str
    status: OrderStatusV1
    amount: Decimal


class PaymentOut(BaseModel):
    id: int
    order_id: int
    amount: Decimal
    payment_date: str
    method: str | None = None
    status: PaymentResultV1
