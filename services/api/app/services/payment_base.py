from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol


class PaymentGatewayError(Exception):
    """Base class for payment gateway errors."""


@dataclass(frozen=True, slots=True)
class CaptureResult:
    amount: Decimal
    method: str | None
    reference_id: str


class PaymentGateway(Protocol):
    """Confirms that funds were captured before the engine records the payment."""

    name: str

    def capture(self, order_id: int, *, amount: Decimal, method: str | None) -> CaptureResult: ...
