"""Helper functions for formatting amounts."""

from __future__ import annotations
from decimal import Decimal

_UNITS = [
    (Decimal("1e12"), "trillion", "T"),
    (Decimal("1e9"), "billion", "B"),
    (Decimal("1e6"), "million", "M"),
    (Decimal("1e3"), "thousand", "k"),
]


def humanize_number(
    value: int | float | Decimal,
    short: bool = False,
    decimals: int = 1,
) -> str:
    """Format a number with human-readable units.

    Args:
        value: The number to format
        short: If True, use short suffixes (k, M, B, T) instead of full words
        decimals: Number of decimal places to show
    """
    d = Decimal(str(value))
    sign = "-" if d < 0 else ""
    d = abs(d)

    if d >= Decimal("1e4"):
        for threshold, long_name, short_name in _UNITS:
            if d >= threshold:
                suffix = short_name if short else f" {long_name}"
                return f"{sign}{(d / threshold):.{decimals}f}{suffix}"

    if d == d.to_integral():
        return f"{sign}{d.quantize(Decimal(1))}"
    return f"{sign}{d:.{decimals}f}"


def humanize_currency(
    value: int | float | Decimal,
    symbol: str = "$",
    short: bool = False,
    decimals: int = 1,
) -> str:
    """Format a currency value with human-readable units."""
    return f"{symbol} {humanize_number(value, short=short, decimals=decimals)}"


def format_amount(value: int | float | Decimal, symbol: str = "") -> str:
    """Two decimals with thousands separators, e.g. ``1,234.50``."""
    amount = f"{Decimal(str(value)):,.2f}"
    return f"{symbol} {amount}" if symbol else amount
