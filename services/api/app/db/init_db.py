from __future__ import annotations

import os

from services.api.app.db.database import get_engine
from services.api.app.db.models import Base


def auto_create_enabled() -> bool:
    return os.getenv("FOODORDER_DB_AUTO_CREATE", "true").strip().lower() in {
        "1",
        "true",
        "yes",
        "y",
    }


def init_db() -> None:
    if not auto_create_enabled():
        return

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
