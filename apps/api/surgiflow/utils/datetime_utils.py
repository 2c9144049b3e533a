"""Datetime helpers for clinical timestamps and day windows."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to UTC; naive values are assumed to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def round_half_up(value: float) -> int:
    """Round like a clinician would (2.5 → 3), not banker's rounding."""
    return int(math.floor(value + 0.5))


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, rounded half up."""
    return round_half_up((end - start).total_seconds() / 60)


def resolve_timezone(tz_name: str | None) -> ZoneInfo:
    name = tz_name or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown timezone %s, defaulting to %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def day_window(day: date, tz_name: str | None) -> tuple[datetime, datetime]:
    """Return the UTC half-open window [start_of_day, next_start_of_day) for a local date."""
    tz = resolve_timezone(tz_name)
    start = datetime.combine(day, time.min).replace(tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min).replace(tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
