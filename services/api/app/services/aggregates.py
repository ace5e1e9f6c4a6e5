from __future__ import annotations

import logging
from decimal import Decimal

from services.api.app.db.models import Order, OrderItem
from services.api.app.services.line_items import to_money
from sqlalchemy import select, update
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def recompute_order_amount(db: Session, order_id: int) -> Decimal:
    """Rewrite ``orders.amount`` as the full sum of the order's current line totals.

    Always derives the sum from scratch, so a prior partial failure or an out-of-band
    edit is corrected by the next call. Runs inside the caller's unit; the triggering
    line item must already be flushed.
    """

    line_totals = db.scalars(select(OrderItem.line_total).where(OrderItem.order_id == order_id))
    amount = to_money(sum(line_totals, Decimal("0")))

    db.execute(
        update(Order)
        .where(Order.id == order_id)
        .values(amount=amount)
    )
    logger.debug("order %s amount recomputed: %s", order_id, amount)
    return amount
