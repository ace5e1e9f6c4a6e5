from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import MenuItem
from services.api.app.services.atomic import atomic
from services.api.app.services.errors import EngineError
from services.api.app.services.events import log_event
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def default_restock_threshold() -> int:
    return int(os.getenv("FOODORDER_RESTOCK_THRESHOLD", "10"))


def default_restock_quantity() -> int:
    return int(os.getenv("FOODORDER_RESTOCK_QUANTITY", "50"))


@dataclass(slots=True)
class RestockResult:
    qualifying: int
    restocked: int
    failed_ids: list[int] = field(default_factory=list)
    # Back above the threshold by the time their unit ran, e.g. topped up by another sweep.
    skipped_ids: list[int] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.restocked + len(self.skipped_ids) == self.qualifying


def run_restock_sweep(
    db: Session,
    *,
    threshold: int | None = None,
    quantity: int | None = None,
) -> RestockResult:
    """Top up every menu item whose availability is below ``threshold``.

    The qualifying ids are read once up front, then each item is replenished in its
    own committed unit. The update re-checks the threshold, so an item another sweep
    already topped up lands in ``skipped_ids`` instead of being filled twice. An item
    that fails is rolled back and skipped, so a failure never undoes or repeats the
    items already done; it shows up as ``restocked`` falling short of ``qualifying``.
    """

    threshold = default_restock_threshold() if threshold is None else threshold
    quantity = default_restock_quantity() if quantity is None else quantity

    menu_item_ids = list(
        db.scalars(
            select(MenuItem.id).where(MenuItem.availability < threshold).order_by(MenuItem.id)
        )
    )
    # Release the read transaction before the per-item units start.
    db.commit()

    result = RestockResult(qualifying=len(menu_item_ids), restocked=0)
    for menu_item_id in menu_item_ids:
        try:
            with atomic(db, "restock_menu_item"):
                updated = db.execute(
                    update(MenuItem)
                    .where(MenuItem.id == menu_item_id)
                    .where(MenuItem.availability < threshold)
                    .values(availability=MenuItem.availability + quantity)
                )
                applied = updated.rowcount > 0
                if applied:
                    log_event(
                        db,
                        entity_type=EntityTypeV1.MENU_ITEM,
                        entity_id=menu_item_id,
                        event_type=EventTypeV1.MENU_ITEM_RESTOCKED,
                        event_payload={"quantity": quantity, "threshold": threshold},
                    )
        except (EngineError, SQLAlchemyError) as e:
            logger.warning("restock of menu item %s failed: %s", menu_item_id, e)
            result.failed_ids.append(menu_item_id)
            continue

        if not applied:
            logger.info("menu item %s no longer below %s; skipped", menu_item_id, threshold)
            result.skipped_ids.append(menu_item_id)
            continue

        result.restocked += 1

    logger.info(
        "restock sweep: %s of %s qualifying item(s) restocked by %s",
        result.restocked,
        result.qualifying,
        quantity,
    )
    return result
