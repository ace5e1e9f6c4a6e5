from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1, EventV1
from packages.shared.schemas.order_v1 import OrderStatusV1, PaymentResultV1, PaymentStatusV1
from services.api.app.db.deps import get_db
from services.api.app.db.models import EventLog, Order
from services.api.app.models.order import (
    LineItemRequest,
    OrderItemOut,
    OrderOut,
    OrderOverview,
    OrderStatusRequest,
    OrderSummary,
    OwnerOrderSummary,
    PaymentOut,
    PaymentRequest,
    PaymentResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
)
from services.api.app.routers.errors import raise_engine_http_error
from services.api.app.services import lifecycle
from services.api.app.services.lifecycle import OrderView
from services.api.app.services.payment_factory import get_payment_gateway
from sqlalchemy.orm import Session

router = APIRouter()


def _order_out(view: OrderView) -> OrderOut:
    return OrderOut(
        id=view.id,
        customer_id=view.customer_id,
        restaurant_id=view.restaurant_id,
        address_id=view.address_id,
        order_date=view.order_date.isoformat(),
        status=OrderStatusV1(view.status),
        amount=view.amount,
        payment_status=PaymentStatusV1(view.payment_status),
        items=[
            OrderItemOut(
                id=i.id,
                menu_item_id=i.menu_item_id,
                quantity=i.quantity,
                unit_price=i.unit_price,
                line_total=i.line_total,
            )
            for i in view.items
        ],
    )


def _summary_out(order: Order) -> OrderSummary:
    return OrderSummary(
        id=order.id,
        restaurant_id=order.restaurant_id,
        order_date=order.order_date.isoformat(),
        status=OrderStatusV1(order.status),
        amount=order.amount,
        payment_status=PaymentStatusV1(order.payment_status),
    )


def _event_out(row: EventLog) -> EventV1:
    return EventV1(
        id=str(row.id),
        entity_type=EntityTypeV1(row.entity_type),
        entity_id=row.entity_id,
        event_type=EventTypeV1(row.event_type),
        payload=row.event_payload_json or {},
        created_at=row.created_at.isoformat(),
    )


@router.post("/v1/orders", response_model=PlaceOrderResponse)
def place_order(payload: PlaceOrderRequest, db: Session = Depends(get_db)) -> PlaceOrderResponse:
    try:
        lifecycle.reject_derived_fields("Order", payload.model_extra or {})
        order_id = lifecycle.place_order(
            db,
            customer_id=payload.customer_id,
            restaurant_id=payload.restaurant_id,
            address_id=payload.address_id,
        )
    except Exception as e:
        raise_engine_http_error(e)

    return PlaceOrderResponse(order_id=order_id)


@router.get("/v1/orders", response_model=list[OrderOverview])
def list_orders(db: Session = Depends(get_db)) -> list[OrderOverview]:
    try:
        rows = lifecycle.order_overview(db)
    except Exception as e:
        raise_engine_http_error(e)

    return [
        OrderOverview(
            id=r.order.id,
            customer_id=r.order.customer_id,
            restaurant_id=r.order.restaurant_id,
            amount=r.order.amount,
            items_count=r.items_count,
        )
        for r in rows
    ]


@router.get("/v1/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)) -> OrderOut:
    try:
        view = lifecycle.get_order(db, order_id)
    except Exception as e:
        raise_engine_http_error(e)

    return _order_out(view)


# Mutating routes answer from the values the engine captured inside its unit. A
# read after the commit could fail with a store error and report a 503 for a write
# that already landed.
@router.post("/v1/orders/{order_id}/items", response_model=OrderOut)
def add_line_item(
    order_id: int, payload: LineItemRequest, db: Session = Depends(get_db)
) -> OrderOut:
    try:
        lifecycle.reject_derived_fields("OrderItem", payload.model_extra or {})
        view = lifecycle.add_line_item(
            db,
            order_id,
            menu_item_id=payload.menu_item_id,
            quantity=payload.quantity,
            unit_price=payload.unit_price,
        )
    except Exception as e:
        raise_engine_http_error(e)

    return _order_out(view)


@router.post("/v1/orders/{order_id}/payments", response_model=PaymentResponse)
def record_payment(
    order_id: int, payload: PaymentRequest, db: Session = Depends(get_db)
) -> PaymentResponse:
    try:
        gateway = get_payment_gateway()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        # Fail fast on unknown orders before asking the gateway for anything.
        lifecycle.get_order(db, order_id)
        capture = gateway.capture(order_id, amount=payload.amount, method=payload.method)
        payment_id = lifecycle.record_payment(
            db, order_id, amount=capture.amount, method=capture.method
        )
    except Exception as e:
        raise_engine_http_error(e)

    return PaymentResponse(
        payment_id=payment_id,
        order_id=order_id,
        payment_status=PaymentStatusV1.PAID,
        gateway=gateway.name,
        reference_id=capture.reference_id,
    )


@router.post("/v1/orders/{order_id}/status", response_model=OrderOut)
def set_order_status(
    order_id: int, payload: OrderStatusRequest, db: Session = Depends(get_db)
) -> OrderOut:
    try:
        view = lifecycle.set_order_status(db, order_id, payload.status)
    except Exception as e:
        raise_engine_http_error(e)

    return _order_out(view)


@router.get("/v1/orders/{order_id}/events", response_model=list[EventV1])
def get_order_events(order_id: int, db: Session = Depends(get_db)) -> list[EventV1]:
    try:
        rows = lifecycle.order_events(db, order_id)
    except Exception as e:
        raise_engine_http_error(e)

    return [_event_out(r) for r in rows]


@router.get("/v1/customers/{customer_id}/orders", response_model=list[OrderSummary])
def list_customer_orders(customer_id: int, db: Session = Depends(get_db)) -> list[OrderSummary]:
    try:
        orders = lifecycle.customer_order_history(db, customer_id)
    except Exception as e:
        raise_engine_http_error(e)

    return [_summary_out(o) for o in orders]


@router.get("/v1/customers/{customer_id}/payments", response_model=list[PaymentOut])
def list_customer_payments(customer_id: int, db: Session = Depends(get_db)) -> list[PaymentOut]:
    try:
        payments = lifecycle.customer_payments(db, customer_id)
    except Exception as e:
        raise_engine_http_error(e)

    return [
        PaymentOut(
            id=p.id,
            order_id=p.order_id,
            amount=p.amount,
            payment_date=p.payment_date.isoformat(),
            method=p.method,
            status=PaymentResultV1(p.status),
        )
        for p in payments
    ]


@router.get("/v1/owners/{owner_user_id}/orders", response_model=list[OwnerOrderSummary])
def list_owner_orders(
    owner_user_id: int, db: Session = Depends(get_db)
) -> list[OwnerOrderSummary]:
    try:
        rows = lifecycle.owner_orders(db, owner_user_id)
    except Exception as e:
        raise_engine_http_error(e)

    return [
        OwnerOrderSummary(
            id=r.order.id,
            restaurant_id=r.order.restaurant_id,
            customer_name=r.customer_name,
            order_date=r.order.order_date.isoformat(),
            status=OrderStatusV1(r.order.status),
            amount=r.order.amount,
        )
        for r in rows
    ]
