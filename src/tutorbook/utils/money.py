"""Monetary helpers; amounts are kept as two-decimal ``Decimal`` values."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: object) -> Decimal:
    """Coerce ``value`` to a Decimal rounded to cents.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    try:
        amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError) as err:
        raise ValueError(f"Amount must be a number, got {value!r}") from err
    if not amount.is_finite():
        raise ValueError("Amount must be finite")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as err:
        raise ValueError(f"Amount is out of range: {value!r}") from err


def to_cents(amount: Decimal) -> int:
    return int((to_money(amount) * 100).to_integral_value())


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)
