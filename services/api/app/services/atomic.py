from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from services.api.app.services.errors import TransientStoreError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, operation: str) -> Iterator[Session]:
    """Run the block as one all-or-nothing unit on ``db``.

    Commits when the block finishes. Any error rolls the whole unit back; store
    outages surface as ``TransientStoreError`` so callers can retry the operation
    as a whole.
    """

    try:
        yield db
        db.commit()
    except OperationalError as e:
        db.rollback()
        logger.warning("%s rolled back: store unavailable: %s", operation, e)
        raise TransientStoreError(operation, e) from e
    except Exception:
        db.rollback()
        raise
