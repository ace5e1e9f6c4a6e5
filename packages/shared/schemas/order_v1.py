"""Shared order schema (v1).

Status vocabularies for orders, payments and deliveries. Stored as their string
values in the ledger tables and exposed as-is on the wire.
"""

from __future__ import annotations

from enum import Enum


class OrderStatusV1(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Line items may only be appended while the kitchen has not handed the order off.
APPENDABLE_ORDER_STATUSES = frozenset(
    {OrderStatusV1.PENDING, OrderStatusV1.CONFIRMED, OrderStatusV1.PREPARING}
)


class PaymentStatusV1(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


class PaymentResultV1(str, Enum):
    INITIATED = "INITIATED"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class DeliveryStatusV1(str, Enum):
    ASSIGNED = "ASSIGNED"
    PICKED_UP = "PICKED_UP"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"
