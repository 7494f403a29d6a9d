from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..core.exceptions import ValidationError

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Convert ints, floats and numeric strings without float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    """Round half-up to two decimal places."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_money(value, field_name: str = "Amount") -> Decimal:
    """Read a money amount from user input, rounded to two places.

    Raises ``ValidationError`` for anything that is not a finite number.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = round_money(value)
        if not amount.is_finite():
            raise ValueError(value)
    except (ArithmeticError, ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a number")
    return amount
