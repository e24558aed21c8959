"""Decimal helpers for currency amounts and rates."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from services.taxes.errors import InvalidInput, TaxEstimatorError

CENT = Decimal("0.01")
ZERO = Decimal("0")
# Keeps every total well inside the default 28 digit Decimal context.
MAX_AMOUNT = Decimal("1E+15")

type Amount = Decimal | int | float | str


def to_decimal(
    value: Amount,
    *,
    name: str = "amount",
    error: type[TaxEstimatorError] = InvalidInput,
) -> Decimal:
    """
    Convert a user or file supplied value to a finite Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion. Thousands separators are accepted in strings.
    Values larger in magnitude than ``MAX_AMOUNT`` are rejected.

    Args:
        value: Decimal, int, float or numeric string.
        name: Field name used in error messages.
        error: Exception class raised when the value is not a finite number.

    Raises:
        TaxEstimatorError: Of the given ``error`` class.
    """
    if isinstance(value, bool):
        raise error(f"{name} must be a number", details=repr(value))

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise error(f"{name} must be a number", details=repr(value)) from None
    else:
        raise error(f"{name} must be a number", details=repr(value))

    if not result.is_finite():
        raise error(f"{name} must be finite", details=repr(value))
    if abs(result) > MAX_AMOUNT:
        raise error(
            f"{name} exceeds the supported maximum of {MAX_AMOUNT:,f}",
            details=str(result),
        )
    return result


def to_non_negative(
    value: Amount,
    *,
    name: str = "amount",
    error: type[TaxEstimatorError] = InvalidInput,
) -> Decimal:
    """Convert like ``to_decimal`` and reject negative values."""
    result = to_decimal(value, name=name, error=error)
    if result < 0:
        raise error(f"{name} cannot be negative", details=str(result))
    return result


def round_currency(value: Decimal) -> Decimal:
    """Round to the cent, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_percent(rate: Decimal) -> str:
    """Render a fractional rate as a percentage without trailing zeros."""
    return f"{(rate * 100).normalize():f}"
