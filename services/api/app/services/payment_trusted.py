from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

from services.api.app.services.payment_base import CaptureResult


class TrustedPaymentGateway:
    """Accepts the caller's word that funds were captured upstream."""

    name = "TRUSTED"

    def capture(self, order_id: int, *, amount: Decimal, method: str | None) -> CaptureResult:
        del order_id

        return CaptureResult(
            amount=amount,
            method=method,
            reference_id=f"trusted_{uuid4().hex[:10]}",
        )
