from __future__ import annotations

import os

from services.api.app.services.payment_base import PaymentGateway
from services.api.app.services.payment_trusted import TrustedPaymentGateway


def get_payment_gateway() -> PaymentGateway:
    """Select the payment gateway based on env vars.

    Defaults to the trusted gateway: payment recording is trusted input unless a real
    gateway is explicitly configured.
    """

    mode = os.getenv("FOODORDER_PAYMENT_GATEWAY", "trusted").strip().lower()

    if mode == "trusted":
        return TrustedPaymentGateway()

    raise ValueError(f"Unknown FOODORDER_PAYMENT_GATEWAY={mode!r}. Expected trusted.")
