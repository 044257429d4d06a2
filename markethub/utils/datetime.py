"""Marketplace clock: notification timestamps live in one configured zone."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from markethub.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "Africa/Lagos"
_UTC_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone in which notifications are stamped and displayed.

    ``APP_TIMEZONE`` accepts an IANA name (``Africa/Lagos``) or a fixed
    offset such as ``UTC+01:00``. Blank or unknown values fall back to
    West Africa Time.
    """

    configured = (get_settings().app_timezone or "").strip()
    return _resolve_timezone(configured or _DEFAULT_TIMEZONE)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach or convert ``value`` to the marketplace zone.

    Naive values are assumed to be marketplace local time already, which is
    how :func:`ensure_app_naive_datetime` writes them.
    """

    if value is None:
        return None

    zone = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return the marketplace wall-clock time of ``value`` without an offset.

    ``DateTime`` columns on SQLite drop offsets, so timestamps are written
    as local wall-clock values and re-attached on read.
    """

    local = ensure_app_timezone(value)
    return local.replace(tzinfo=None) if local is not None else None


def _resolve_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        offset = _parse_utc_offset(name)
    return offset if offset is not None else ZoneInfo(_DEFAULT_TIMEZONE)


def _parse_utc_offset(name: str) -> timezone | None:
    match = _UTC_OFFSET.match(name)
    if match is None:
        return None
    delta = timedelta(hours=int(match["hours"]), minutes=int(match["minutes"] or 0))
    return timezone(-delta if match["sign"] == "-" else delta)
