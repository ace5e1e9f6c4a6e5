from __future__ import annotations

from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import EventLog
from sqlalchemy import select
from sqlalchemy.orm import Session


def log_event(
    db: Session,
    *,
    entity_type: EntityTypeV1,
    entity_id: int | str,
    event_type: EventTypeV1,
    event_payload: dict,
) -> None:
    # Added to the caller's unit; committed or discarded together with the mutation.
    db.add(
        EventLog(
            entity_type=entity_type.value,
            entity_id=str(entity_id),
            event_type=event_type.value,
            event_payload_json=event_payload,
        )
    )


def list_events(db: Session, *, entity_type: EntityTypeV1, entity_id: int | str) -> list[EventLog]:
    return list(
        db.scalars(
            select(EventLog)
            .where(EventLog.entity_type == entity_type.value)
            .where(EventLog.entity_id == str(entity_id))
            .order_by(EventLog.id)
        )
    )
