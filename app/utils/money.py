"""
Numeric helpers for money and ratios.

Amounts are kept as Decimal end to end (the store uses Numeric(10, 2)); only
the derived analytics are handed out as floats.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

Number = Union[Decimal, int, float, str]

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps 19.99 as 19.99 instead of its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def quantize_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_money(value: Number) -> str:
    """Serialized form of a stored amount: always two fractional digits"""
    return f"{quantize_money(value):.2f}"


def money_to_float(value: Number) -> float:
    return float(quantize_money(value))


def sum_money(values: Iterable[Number]) -> Decimal:
    return sum((to_decimal(v) for v in values), ZERO)


def percentage_of(part: Number, whole: Number) -> float:
    """part / whole * 100, or 0 when whole is not positive"""
    whole = to_decimal(whole)
    if whole <= 0:
        return 0.0
    return float(to_decimal(part) / whole * HUNDRED)


def percent_change(current: Number, previous: Number) -> float:
    """
    Relative change from previous to current, in percent.

    A zero (or negative) previous period yields 0 rather than an infinite
    change, so "nothing last month, something this month" reads as 0%.
    """
    previous = to_decimal(previous)
    if previous <= 0:
        return 0.0
    return float((to_decimal(current) - previous) / previous * HUNDRED)
