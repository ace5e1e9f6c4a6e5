from __future__ import annotations

import argparse
import logging

from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.main import configure_logging
from services.api.app.services.restock import run_restock_sweep

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Replenish low-stock menu items. Meant to be run from a scheduler (cron etc.)."
    )
    parser.add_argument("--threshold", type=int, default=None, help="Restock items below this")
    parser.add_argument("--quantity", type=int, default=None, help="Units to add per item")
    args = parser.parse_args()

    configure_logging()
    init_db()

    db = db_session()
    try:
        result = run_restock_sweep(db, threshold=args.threshold, quantity=args.quantity)
    finally:
        db.close()

    print(f"Restocked {result.restocked}/{result.qualifying} menu item(s)")
    if not result.complete:
        logger.error("restock sweep incomplete; failed menu items: %s", result.failed_ids)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
