"""Display formatting shared by notification templates and triggers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

_MAX_FRACTION_DIGITS = 3


def format_amount(value: int | float | Decimal | None) -> str:
    """Render ``value`` with thousands separators (``1234567`` -> ``1,234,567``).

    Fractions keep at most three digits and drop trailing zeros, so
    ``1234.5`` renders as ``1,234.5``. ``None`` renders as an empty string.
    """

    if value is None or isinstance(value, bool):
        return ""
    number = Decimal(str(value))
    if not number.is_finite():
        return str(value)
    if number == number.to_integral_value():
        return f"{int(number):,}"
    rendered = f"{number:,.{_MAX_FRACTION_DIGITS}f}"
    return rendered.rstrip("0").rstrip(".")


def format_short_date(value: date) -> str:
    """Return ``value`` as ``month/day/year`` without zero padding."""

    return f"{value.month}/{value.day}/{value.year}"


__all__ = ["format_amount", "format_short_date"]
