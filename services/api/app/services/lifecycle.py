"""Order lifecycle: place, append line items, record payments, move status.

Each mutating call is one atomic unit on the given session. Known leniencies are
kept as-is: a line item is accepted even when its menu item is out of stock, any
status may follow any other, and a payment amount is never compared with the
order total.

Mutations hand back plain values captured before the unit commits, so a caller
never has to go back to the store to learn what it just wrote.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from packages.shared.schemas.order_v1 import (
    APPENDABLE_ORDER_STATUSES,
    OrderStatusV1,
    PaymentResultV1,
    PaymentStatusV1,
)
from services.api.app.db.models import (
    Address,
    EventLog,
    MenuItem,
    Order,
    OrderItem,
    Payment,
    Restaurant,
    User,
)
from services.api.app.services.aggregates import recompute_order_amount
from services.api.app.services.atomic import atomic
from services.api.app.services.errors import (
    InvalidOrderStatusError,
    InvariantViolationError,
    OrderNotAppendableError,
    ReferenceNotFoundError,
)
from services.api.app.services.events import list_events, log_event
from services.api.app.services.inventory import decrement_availability
from services.api.app.services.line_items import calculate_line_total, to_money
from sqlalchemy import func, select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_ORDER_DERIVED = frozenset({"amount", "payment_status"})

# A line-item payload is guarded for the order fields it rolls up into as well.
DERIVED_FIELDS: dict[str, frozenset[str]] = {
    "Order": _ORDER_DERIVED,
    "OrderItem": _ORDER_DERIVED | {"line_total"},
}


@dataclass(frozen=True, slots=True)
class LineItemView:
    id: int
    menu_item_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True, slots=True)
class OrderView:
    id: int
    customer_id: int
    restaurant_id: int
    address_id: int
    order_date: datetime
    status: str
    amount: Decimal
    payment_status: str
    items: tuple[LineItemView, ...]


@dataclass(frozen=True, slots=True)
class OwnerOrderRow:
    order: Order
    customer_name: str


@dataclass(frozen=True, slots=True)
class OrderOverviewRow:
    order: Order
    items_count: int


def reject_derived_fields(entity: str, payload: Mapping[str, object] | Iterable[str]) -> None:
    """Refuse a caller payload that tries to write a field the engine derives."""

    derived = DERIVED_FIELDS.get(entity, frozenset())
    for field in payload:
        if field in derived:
            raise InvariantViolationError(entity, field)


def _require(db: Session, model: type, entity_id: int, entity: str, *, for_update: bool = False):
    if for_update:
        # Re-read past the identity map and hold the row until the unit ends.
        row = db.get(model, entity_id, with_for_update=True, populate_existing=True)
    else:
        row = db.get(model, entity_id)
    if row is None:
        raise ReferenceNotFoundError(entity, entity_id)
    return row


def _coerce_status(status: OrderStatusV1 | str) -> OrderStatusV1:
    try:
        return OrderStatusV1(status)
    except ValueError as e:
        raise InvalidOrderStatusError(status) from e


def _order_items(db: Session, order_id: int) -> list[OrderItem]:
    return list(
        db.scalars(select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id))
    )


def _view(order: Order, items: Iterable[OrderItem]) -> OrderView:
    return OrderView(
        id=order.id,
        customer_id=order.customer_id,
        restaurant_id=order.restaurant_id,
        address_id=order.address_id,
        order_date=order.order_date,
        status=order.status,
        amount=order.amount,
        payment_status=order.payment_status,
        items=tuple(
            LineItemView(
                id=i.id,
                menu_item_id=i.menu_item_id,
                quantity=i.quantity,
                unit_price=i.unit_price,
                line_total=i.line_total,
            )
            for i in items
        ),
    )


def place_order(db: Session, customer_id: int, restaurant_id: int, address_id: int) -> int:
    with atomic(db, "place_order"):
        _require(db, User, customer_id, "Customer")
        _require(db, Restaurant, restaurant_id, "Restaurant")
        _require(db, Address, address_id, "Address")

        order = Order(
            customer_id=customer_id,
            restaurant_id=restaurant_id,
            address_id=address_id,
            status=OrderStatusV1.PENDING.value,
            amount=Decimal("0.00"),
            payment_status=PaymentStatusV1.UNPAID.value,
        )
        db.add(order)
        db.flush()

        log_event(
            db,
            entity_type=EntityTypeV1.ORDER,
            entity_id=order.id,
            event_type=EventTypeV1.ORDER_PLACED,
            event_payload={
                "customer_id": customer_id,
                "restaurant_id": restaurant_id,
                "address_id": address_id,
            },
        )
        order_id = order.id

    logger.info(
        "order %s placed for customer %s at restaurant %s", order_id, customer_id, restaurant_id
    )
    return order_id


def add_line_item(
    db: Session,
    order_id: int,
    menu_item_id: int,
    quantity: int,
    unit_price: Decimal | None = None,
) -> OrderView:
    """Append a line item and apply its consequences as one unit.

    The line total is computed here, the order amount is re-derived from all of the
    order's items, and the menu item's stock is decremented when there is enough of
    it. ``unit_price`` defaults to the menu item's current price and is frozen on the
    line item either way.

    The order row is locked for the whole unit, so appends to one order run one at a
    time and a status change cannot land between the appendable check and the
    insert. Returns the order as committed; the new item is ``items[-1]``.
    """

    with atomic(db, "add_line_item"):
        order = _require(db, Order, order_id, "Order", for_update=True)
        menu_item = _require(db, MenuItem, menu_item_id, "MenuItem")

        if OrderStatusV1(order.status) not in APPENDABLE_ORDER_STATUSES:
            raise OrderNotAppendableError(order_id, order.status)

        price = to_money(menu_item.price if unit_price is None else unit_price)
        item = OrderItem(
            order_id=order_id,
            menu_item_id=menu_item_id,
            quantity=quantity,
            unit_price=price,
            line_total=calculate_line_total(quantity, price),
        )
        db.add(item)
        db.flush()

        amount = recompute_order_amount(db, order_id)
        decremented = decrement_availability(db, menu_item_id, quantity)

        log_event(
            db,
            entity_type=EntityTypeV1.ORDER,
            entity_id=order_id,
            event_type=EventTypeV1.LINE_ITEM_ADDED,
            event_payload={
                "order_item_id": item.id,
                "menu_item_id": menu_item_id,
                "quantity": quantity,
                "unit_price": str(price),
                "line_total": str(item.line_total),
                "amount": str(amount),
                "stock_decremented": decremented,
            },
        )
        db.flush()
        view = _view(order, _order_items(db, order_id))

    logger.info(
        "order %s: added %s x menu item %s, amount now %s", order_id, quantity, menu_item_id, amount
    )
    return view


def record_payment(
    db: Session,
    order_id: int,
    amount: Decimal,
    method: str | None = None,
) -> int:
    """Record a captured payment and mark the order PAID.

    The capture already happened upstream, so the payment is stored as SUCCESS. The
    order's own ``amount`` is neither read nor changed.
    """

    with atomic(db, "record_payment"):
        order = _require(db, Order, order_id, "Order", for_update=True)

        payment = Payment(
            order_id=order_id,
            amount=to_money(amount),
            method=method,
            status=PaymentResultV1.SUCCESS.value,
        )
        db.add(payment)
        order.payment_status = PaymentStatusV1.PAID.value
        db.flush()

        log_event(
            db,
            entity_type=EntityTypeV1.ORDER,
            entity_id=order_id,
            event_type=EventTypeV1.PAYMENT_RECORDED,
            event_payload={
                "payment_id": payment.id,
                "amount": str(payment.amount),
                "method": method,
            },
        )
        payment_id = payment.id

    logger.info("order %s: payment %s recorded (%s)", order_id, payment_id, to_money(amount))
    return payment_id


def set_order_status(db: Session, order_id: int, status: OrderStatusV1 | str) -> OrderView:
    new_status = _coerce_status(status)

    with atomic(db, "set_order_status"):
        order = _require(db, Order, order_id, "Order", for_update=True)
        previous = order.status
        order.status = new_status.value

        log_event(
            db,
            entity_type=EntityTypeV1.ORDER,
            entity_id=order_id,
            event_type=EventTypeV1.ORDER_STATUS_CHANGED,
            event_payload={"from": previous, "to": new_status.value},
        )
        db.flush()
        view = _view(order, _order_items(db, order_id))

    logger.info("order %s: status %s -> %s", order_id, previous, new_status.value)
    return view


def get_order(db: Session, order_id: int) -> OrderView:
    order = _require(db, Order, order_id, "Order")
    return _view(order, _order_items(db, order_id))


def customer_order_history(db: Session, customer_id: int) -> list[Order]:
    return list(
        db.scalars(
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.order_date.desc(), Order.id.desc())
        )
    )


def customer_payments(db: Session, customer_id: int) -> list[Payment]:
    """Payments made against any of the customer's orders, newest first."""

    return list(
        db.scalars(
            select(Payment)
            .join(Order, Order.id == Payment.order_id)
            .where(Order.customer_id == customer_id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
        )
    )


def owner_orders(db: Session, owner_user_id: int) -> list[OwnerOrderRow]:
    """Orders placed at any restaurant the user owns, with the customer's name."""

    owned = select(Restaurant.id).where(Restaurant.owner_user_id == owner_user_id)
    rows = db.execute(
        select(Order, User.name)
        .join(User, User.id == Order.customer_id)
        .where(Order.restaurant_id.in_(owned))
        .order_by(Order.order_date.desc(), Order.id.desc())
    )
    return [OwnerOrderRow(order=order, customer_name=name) for order, name in rows]


def order_overview(db: Session) -> list[OrderOverviewRow]:
    items_count = func.count(OrderItem.id)
    rows = db.execute(
        select(Order, items_count)
        .outerjoin(OrderItem, OrderItem.order_id == Order.id)
        .group_by(Order.id)
        .order_by(Order.order_date.desc(), Order.id.desc())
    )
    return [OrderOverviewRow(order=order, items_count=count) for order, count in rows]


def list_restaurants(db: Session) -> list[Restaurant]:
    return list(db.scalars(select(Restaurant).order_by(Restaurant.id)))


def restaurant_menu(db: Session, restaurant_id: int) -> list[MenuItem]:
    return list(
        db.scalars(
            select(MenuItem).where(MenuItem.restaurant_id == restaurant_id).order_by(MenuItem.id)
        )
    )


def order_events(db: Session, order_id: int) -> list[EventLog]:
    _require(db, Order, order_id, "Order")
    return list_events(db, entity_type=EntityTypeV1.ORDER, entity_id=order_id)
