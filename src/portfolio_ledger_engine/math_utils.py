# src/portfolio_ledger_engine/math_utils.py
from decimal import ROUND_HALF_UP, Decimal

from .constants import FLOATING_POINT_TOLERANCE


def is_effectively_zero(value: float, tolerance: float = FLOATING_POINT_TOLERANCE) -> bool:
    return abs(value) < tolerance


def are_effectively_equal(a: float, b: float, tolerance: float = FLOATING_POINT_TOLERANCE) -> bool:
    return is_effectively_zero(a - b, tolerance)


def round_currency(value: float) -> float:
    """Rounds to whole cents, halves away from zero."""
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Renders a number canonically: integral values without a trailing '.0'."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)
