"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    now_in_app_timezone,
)
from .formatting import format_amount, format_short_date

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "format_amount",
    "format_short_date",
    "get_app_timezone",
    "now_in_app_timezone",
]
