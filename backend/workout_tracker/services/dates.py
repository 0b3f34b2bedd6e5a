"""
Date Utilities
==============
Conversions between calendar dates and the ``YYYY-MM-DD`` keys used by
the workout document, plus week/month boundaries and localized names.

Everything works on ``datetime.date`` (no time zone): the keys are
calendar days, not instants.
"""

from __future__ import annotations

import calendar
import logging
import math
import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta
from typing import Optional, Union

logger = logging.getLogger(__name__)

DateLike = Union[date, str]

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# ---------------------------------------------------------------------------
# Lookup tables (index 0 = Sunday / January)
# ---------------------------------------------------------------------------

DEFAULT_LANGUAGE = "ru"

DAY_NAMES: dict[str, list[str]] = {
    "ru": ["Вс", "Пн", "Вт", "Ср", "Чт", "Пт", "Сб"],
    "en": ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"],
}

MONTH_NAMES: dict[str, list[str]] = {
    "ru": [
        "Январь", "Февраль", "Март", "Апрель", "Май", "Июнь",
        "Июль", "Август", "Сентябрь", "Октябрь", "Ноябрь", "Декабрь",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
}


def _sunday_index(d: date) -> int:
    """Weekday with Sunday=0 .. Saturday=6."""
    return (d.weekday() + 1) % 7


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def format_date(d: date) -> str:
    """Return the canonical ``YYYY-MM-DD`` key for *d*."""
    if isinstance(d, datetime):
        d = d.date()
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date(value: DateLike) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` key.

    Returns None for anything that is not a real calendar date. A trailing
    time component (``2025-10-06T10:00:00``) is ignored.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()[:10]
    if not _ISO_DATE.match(text):
        logger.debug("Unparsable date string %r", value)
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        logger.debug("Unparsable date string %r", value)
        return None


def iter_dates(start: DateLike, end: DateLike) -> Iterator[date]:
    """Yield every day from *start* to *end* inclusive, oldest first.

    Nothing is yielded if either bound is invalid or start is after end.
    """
    first = parse_date(start)
    last = parse_date(end)
    if first is None or last is None:
        return
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


# ---------------------------------------------------------------------------
# Week / month boundaries
# ---------------------------------------------------------------------------

def get_week_start(d: date) -> date:
    """Monday of the week containing *d*."""
    weekday = _sunday_index(d)
    back = 6 if weekday == 0 else weekday - 1
    return d - timedelta(days=back)


def get_week_dates(d: date) -> list[str]:
    """The Monday-to-Sunday week containing *d*, as 7 keys."""
    monday = get_week_start(d)
    return [format_date(monday + timedelta(days=i)) for i in range(7)]


def get_month_dates(d: date) -> list[str]:
    """Every day of *d*'s month, first to last."""
    days_in_month = calendar.monthrange(d.year, d.month)[1]
    return [format_date(date(d.year, d.month, day)) for day in range(1, days_in_month + 1)]


def get_year_dates(year: int) -> list[str]:
    return [format_date(d) for d in iter_dates(date(year, 1, 1), date(year, 12, 31))]


def get_week_number(d: date) -> int:
    """Week-of-year counted from January 1st's weekday.

    Not ISO-8601: week 1 is whatever week holds January 1st, with weeks
    starting on Sunday.
    """
    first_day = date(d.year, 1, 1)
    past_days = (d - first_day).days
    return math.ceil((past_days + _sunday_index(first_day) + 1) / 7)


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

def get_day_name(d: date, language: str = DEFAULT_LANGUAGE) -> str:
    names = DAY_NAMES.get(language, DAY_NAMES[DEFAULT_LANGUAGE])
    return names[_sunday_index(d)]


def get_month_name(d: date, language: str = DEFAULT_LANGUAGE) -> str:
    names = MONTH_NAMES.get(language, MONTH_NAMES[DEFAULT_LANGUAGE])
    return names[d.month - 1]
