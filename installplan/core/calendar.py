from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterator

DAY_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def date_key(value: date | datetime) -> str:
    """Format ``value`` as ``YYYY-MM-DD`` from its own calendar fields.

    Aware datetimes are keyed on their wall-clock fields; nothing is shifted
    to UTC, so local midnight always maps to the same day.
    """

    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_day_key(key: str) -> date:
    if not isinstance(key, str) or not DAY_KEY_PATTERN.match(key):
        raise ValueError(f"invalid day key: {key!r}")
    year, month, day = (int(part) for part in key.split("-"))
    return date(year, month, day)


def week_of(value: date | datetime) -> list[date]:
    """Return the Monday..Sunday window containing ``value``."""

    day = date(value.year, value.month, value.day)
    monday = day - timedelta(days=day.weekday())
    return [monday + timedelta(days=offset) for offset in range(7)]


def next_working_day(day_key: str) -> str:
    current = parse_day_key(day_key) + timedelta(days=1)
    if current.weekday() == 5:
        current += timedelta(days=2)
    if current.weekday() == 6:
        current += timedelta(days=1)
    return date_key(current)


def is_weekend(day_key: str) -> bool:
    return parse_day_key(day_key).weekday() >= 5


def iter_days(start: str, end: str) -> Iterator[str]:
    """Yield every day key from ``start`` to ``end`` inclusive."""

    current = parse_day_key(start)
    last = parse_day_key(end)
    while current <= last:
        yield date_key(current)
        current += timedelta(days=1)
