from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Scale a monetary value to the currency's minor unit."""

    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_line_total(quantity: int, unit_price: Decimal) -> Decimal:
    """Value of a line item at insertion time: quantity x unit_price, in cents precision.

    Negative inputs are a caller contract violation and are not checked here.
    """

    return to_money(Decimal(quantity) * to_money(unit_price))
