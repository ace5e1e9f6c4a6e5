from __future__ import annotations

import logging

from services.api.app.db.models import MenuItem
from sqlalchemy import update
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def decrement_availability(db: Session, menu_item_id: int, quantity: int) -> bool:
    """Take ``quantity`` units off the menu item's stock if there is enough of it.

    The availability check and the write are a single conditional UPDATE, so two
    concurrent line items for the same menu item cannot both pass the check on a
    stale value. When stock is short the row is left unchanged and the line item
    stands anyway. Returns whether stock was decremented.
    """

    if quantity <= 0:
        return False

    result = db.execute(
        update(MenuItem)
        .where(MenuItem.id == menu_item_id)
        .where(MenuItem.availability > 0)
        .where(MenuItem.availability >= quantity)
        .values(availability=MenuItem.availability - quantity)
    )

    if result.rowcount == 0:
        logger.warning(
            "menu item %s: insufficient stock for %s unit(s); availability left unchanged",
            menu_item_id,
            quantity,
        )
        return False

    return True
