from __future__ import annotations

from decimal import Decimal

import pytest
from packages.shared.schemas.order_v1 import OrderStatusV1
from services.api.app.db.models import Order, Payment
from services.api.app.services import lifecycle
from services.api.app.services.errors import (
    InvalidOrderStatusError,
    InvariantViolationError,
    ReferenceNotFoundError,
)
from sqlalchemy import func, select
from sqlalchemy.orm import Session


def test_place_order_starts_empty_pending_unpaid(db: Session, catalog) -> None:
    order_id = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )

    view = lifecycle.get_order(db, order_id)
    assert view.items == ()
    assert view.status == "PENDING"
    assert view.payment_status == "UNPAID"
    assert view.amount == Decimal("0")
    assert view.order_date is not None


@pytest.mark.parametrize("missing", ["Customer", "Restaurant", "Address"])
def test_place_order_requires_existing_references(db: Session, catalog, missing: str) -> None:
    refs = {
        "Customer": catalog.customer_id,
        "Restaurant": catalog.restaurant_id,
        "Address": catalog.address_id,
    }
    refs[missing] = 4242

    with pytest.raises(ReferenceNotFoundError) as excinfo:
        lifecycle.place_order(db, refs["Customer"], refs["Restaurant"], refs["Address"])

    assert excinfo.value.entity == missing
    assert excinfo.value.entity_id == 4242
    assert db.scalar(select(func.count(Order.id))) == 0


def test_record_payment_marks_order_paid_without_touching_amount(db: Session, catalog) -> None:
    order_id = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )
    lifecycle.add_line_item(db, order_id, catalog.pasta_id, 2)

    first = lifecycle.record_payment(db, order_id, Decimal("21.98"), method="CREDIT_CARD")
    second = lifecycle.record_payment(db, order_id, Decimal("21.98"))

    order = lifecycle.get_order(db, order_id)
    assert first != second
    assert order.payment_status == "PAID"
    assert order.amount == Decimal("21.98")

    payments = list(
        db.scalars(select(Payment).where(Payment.order_id == order_id).order_by(Payment.id))
    )
    assert [p.status for p in payments] == ["SUCCESS", "SUCCESS"]
    assert payments[0].method == "CREDIT_CARD"


def test_record_payment_allows_amount_mismatch(db: Session, catalog) -> None:
    order_id = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )
    lifecycle.add_line_item(db, order_id, catalog.pizza_id, 1)

    payment_id = lifecycle.record_payment(db, order_id, Decimal("1.00"))

    assert db.get(Payment, payment_id).amount == Decimal("1.00")
    assert lifecycle.get_order(db, order_id).amount == Decimal("8.49")


def test_record_payment_unknown_order(db: Session, catalog) -> None:
    del catalog
    with pytest.raises(ReferenceNotFoundError):
        lifecycle.record_payment(db, 31337, Decimal("5"))

    assert db.scalar(select(func.count(Payment.id))) == 0


def test_set_order_status_is_unguarded(db: Session, catalog) -> None:
    order_id = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )

    lifecycle.set_order_status(db, order_id, OrderStatusV1.DELIVERED)
    lifecycle.set_order_status(db, order_id, "PENDING")

    assert lifecycle.get_order(db, order_id).status == "PENDING"
    changes = [
        e.event_payload_json
        for e in lifecycle.order_events(db, order_id)
        if e.event_type == "ORDER_STATUS_CHANGED"
    ]
    assert changes == [
        {"from": "PENDING", "to": "DELIVERED"},
        {"from": "DELIVERED", "to": "PENDING"},
    ]


def test_set_order_status_rejects_unknown_values(db: Session, catalog) -> None:
    order_id = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )

    with pytest.raises(InvalidOrderStatusError):
        lifecycle.set_order_status(db, order_id, "LOST_IN_SPACE")

    with pytest.raises(ReferenceNotFoundError):
        lifecycle.set_order_status(db, 999, "CONFIRMED")

    assert lifecycle.get_order(db, order_id).status == "PENDING"


def test_cancellation_does_not_restore_stock(db: Session, catalog) -> None:
    order_id = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )
    lifecycle.add_line_item(db, order_id, catalog.pizza_id, 4)

    lifecycle.set_order_status(db, order_id, OrderStatusV1.CANCELLED)

    menu = {m.id: m for m in lifecycle.restaurant_menu(db, catalog.restaurant_id)}
    assert menu[catalog.pizza_id].availability == 46
    assert db.get(Order, order_id) is not None


def test_customer_order_history_is_scoped_to_customer(db: Session, catalog) -> None:
    mine = [
        lifecycle.place_order(db, catalog.customer_id, catalog.restaurant_id, catalog.address_id)
        for _ in range(2)
    ]
    lifecycle.place_order(db, catalog.other_customer_id, catalog.restaurant_id, catalog.address_id)

    history = lifecycle.customer_order_history(db, catalog.customer_id)

    assert sorted(o.id for o in history) == sorted(mine)


@pytest.mark.parametrize(
    ("entity", "payload", "field"),
    [
        ("Order", {"customer_id": 1, "amount": "10.00"}, "amount"),
        ("Order", {"payment_status": "PAID"}, "payment_status"),
        ("OrderItem", {"quantity": 1, "line_total": "99.00"}, "line_total"),
        ("OrderItem", {"menu_item_id": 1, "amount": "0.01"}, "amount"),
        ("OrderItem", {"menu_item_id": 1, "payment_status": "PAID"}, "payment_status"),
    ],
)
def test_derived_fields_cannot_be_written(entity: str, payload: dict, field: str) -> None:
    with pytest.raises(InvariantViolationError) as excinfo:
        lifecycle.reject_derived_fields(entity, payload)

    assert excinfo.value.field == field


def test_plain_payloads_pass_derived_field_guard() -> None:
    lifecycle.reject_derived_fields("OrderItem", {"menu_item_id": 1, "quantity": 2})
    lifecycle.reject_derived_fields("Order", {})


def test_list_restaurants(db: Session, catalog) -> None:
    restaurants = lifecycle.list_restaurants(db)

    assert [r.id for r in restaurants] == [catalog.restaurant_id, catalog.other_restaurant_id]
    assert [r.name for r in restaurants] == ["Italiano House", "Burger Hub"]


def test_owner_sees_orders_at_owned_restaurants_only(db: Session, catalog) -> None:
    johns = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )
    janes = lifecycle.place_order(
        db, catalog.other_customer_id, catalog.restaurant_id, catalog.address_id
    )
    lifecycle.place_order(db, catalog.customer_id, catalog.other_restaurant_id, catalog.address_id)

    rows = lifecycle.owner_orders(db, catalog.owner_id)

    assert [r.order.id for r in rows] == [janes, johns]
    assert [r.customer_name for r in rows] == ["Jane Roe", "John Doe"]
    assert lifecycle.owner_orders(db, catalog.customer_id) == []


def test_order_overview_counts_items(db: Session, catalog) -> None:
    busy = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )
    lifecycle.add_line_item(db, busy, catalog.pasta_id, 2)
    lifecycle.add_line_item(db, busy, catalog.pizza_id, 1)
    empty = lifecycle.place_order(
        db, catalog.other_customer_id, catalog.restaurant_id, catalog.address_id
    )

    rows = {r.order.id: r for r in lifecycle.order_overview(db)}

    assert rows[busy].items_count == 2
    assert rows[busy].order.amount == Decimal("30.47")
    assert rows[empty].items_count == 0
    assert rows[empty].order.amount == Decimal("0")


def test_customer_payments_are_scoped_to_customer(db: Session, catalog) -> None:
    mine = lifecycle.place_order(
        db, catalog.customer_id, catalog.restaurant_id, catalog.address_id
    )
    theirs = lifecycle.place_order(
        db, catalog.other_customer_id, catalog.restaurant_id, catalog.address_id
    )
    first = lifecycle.record_payment(db, mine, Decimal("5.00"), method="CASH")
    second = lifecycle.record_payment(db, mine, Decimal("7.50"), method="CREDIT_CARD")
    lifecycle.record_payment(db, theirs, Decimal("9.99"))

    payments = lifecycle.customer_payments(db, catalog.customer_id)

    assert [p.id for p in payments] == [second, first]
    assert {p.order_id for p in payments} == {mine}
    assert [p.status for p in payments] == ["SUCCESS", "SUCCESS"]
