"""Shared event schema (v1).

The engine appends one event per ledger or catalog mutation. Clients can consume
these events to render an order timeline.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EntityTypeV1(str, Enum):
    ORDER = "Order"
    MENU_ITEM = "MenuItem"


class EventTypeV1(str, Enum):
    ORDER_PLACED = "ORDER_PLACED"
    LINE_ITEM_ADDED = "LINE_ITEM_ADDED"
    PAYMENT_RECORDED = "PAYMENT_RECORDED"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"
    MENU_ITEM_RESTOCKED = "MENU_ITEM_RESTOCKED"


class EventV1(BaseModel):
    id: str

    entity_type: EntityTypeV1
    entity_id: str

    event_type: EventTypeV1
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str
