"""Read-only business metrics over the ledger and catalog.

Each function is deterministic for a given store state and returns zero when no
matching rows exist.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import ROUND_FLOOR, Decimal

from packages.shared.schemas.order_v1 import PaymentResultV1, PaymentStatusV1
from services.api.app.db.models import Order, Payment, Review
from services.api.app.services.line_items import to_money
from sqlalchemy import select
from sqlalchemy.orm import Session

POINTS_PER_CURRENCY_UNIT = Decimal("10")


def loyalty_points(db: Session, customer_id: int) -> int:
    """One point per full 10 currency units spent on the customer's paid orders."""

    amounts = db.scalars(
        select(Order.amount)
        .where(Order.customer_id == customer_id)
        .where(Order.payment_status == PaymentStatusV1.PAID.value)
    )
    total = sum(amounts, Decimal("0"))
    return int((total / POINTS_PER_CURRENCY_UNIT).to_integral_value(rounding=ROUND_FLOOR))


def average_rating(db: Session, restaurant_id: int) -> Decimal:
    ratings = list(db.scalars(select(Review.rating).where(Review.restaurant_id == restaurant_id)))
    if not ratings:
        return Decimal("0")
    return to_money(Decimal(sum(ratings)) / Decimal(len(ratings)))


def daily_revenue(db: Session, restaurant_id: int, day: date) -> Decimal:
    """Successful payments taken on ``day`` for orders placed with the restaurant."""

    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1)

    amounts = db.scalars(
        select(Payment.amount)
        .join(Order, Order.id == Payment.order_id)
        .where(Order.restaurant_id == restaurant_id)
        .where(Payment.status == PaymentResultV1.SUCCESS.value)
        .where(Payment.payment_date >= start)
        .where(Payment.payment_date < end)
    )
    return to_money(sum(amounts, Decimal("0")))
