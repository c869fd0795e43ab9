# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Day-key kernel.

Every component asks this module which day it is and how far apart two days
are. Day keys are canonical ``YYYY-MM-DD`` strings in the configured zone
(``MOODIARY_TIMEZONE``), never in the zone of the machine running the code.
Arithmetic is done on ``datetime.date`` values, so there is no DST ambiguity.
"""

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

import pytz

from moodiary import config
from moodiary.utils.errors import InvalidDateKey

DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Sunday-first, matching the weekday buckets shown on the dashboard
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def now_local(now: Optional[datetime] = None) -> datetime:
    """Current instant in the configured zone. Naive ``now`` is taken as UTC."""
    if now is None:
        return datetime.now(config.TIMEZONE)
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(config.TIMEZONE)


def today(now: Optional[datetime] = None) -> date:
    return now_local(now).date()


def today_key(now: Optional[datetime] = None) -> str:
    return date_key(today(now))


def date_key(value: Union[date, datetime]) -> str:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        value = now_local(value).date()
    return value.isoformat()


def parse_date_key(key) -> date:
    if not isinstance(key, str) or not DATE_KEY_RE.match(key):
        raise InvalidDateKey(key)
    try:
        return date(int(key[0:4]), int(key[5:7]), int(key[8:10]))
    except ValueError:
        raise InvalidDateKey(key)


def add_days(day: date, n: int) -> date:
    return day + timedelta(days=n)


def days_between(a: date, b: date) -> int:
    """Signed number of days from ``a`` to ``b``."""
    return (b - a).days


def weekday_index(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday..Sunday week containing ``day``."""
    monday = add_days(day, -day.weekday())
    return monday, add_days(monday, 6)


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    try:
        last = calendar.monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last)
    except ValueError:
        raise InvalidDateKey(f"{year:04d}-{month:02d}")
