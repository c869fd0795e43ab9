# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import date, datetime
from typing import Optional, Union

from moodiary.schemas.mood_schemas import DateRange
from moodiary.utils.calendar_utils import (
    add_days,
    date_key,
    days_between,
    month_start,
    parse_date_key,
    today,
    week_bounds,
)
from moodiary.utils.errors import InvalidRange

NAMED_RANGES = ("week", "month", "custom")


def _make_range(start: date, end: date) -> DateRange:
    return DateRange(
        start_key=date_key(start),
        end_key=date_key(end),
        total_days=days_between(start, end) + 1,
    )


def resolve_range(
    selector: Union[str, int],
    start_key: Optional[str] = None,
    end_key: Optional[str] = None,
    now: Optional[datetime] = None,
) -> DateRange:
    """
    Map a range selector to an inclusive [start, end] day interval.

    - "7", "30", any N  -> the last N days including today
    - "week"            -> Monday..Sunday of the current week (not clipped to today)
    - "month"           -> first of the month through today
    - "custom"          -> start_key..end_key as given
    """
    selector = str(selector).strip().lower()

    if selector == "custom":
        if not start_key or not end_key:
            raise InvalidRange("Custom range needs both start and end dates")
        start, end = parse_date_key(start_key), parse_date_key(end_key)
        if start > end:
            raise InvalidRange(f"Start date {start_key} is after end date {end_key}")
        return _make_range(start, end)

    current = today(now)

    if selector == "week":
        return _make_range(*week_bounds(current))

    if selector == "month":
        return _make_range(month_start(current), current)

    if selector.isdecimal():
        days = int(selector)
        if days < 1:
            raise InvalidRange("Range must cover at least one day")
        try:
            start = add_days(current, -(days - 1))
        except (ValueError, OverflowError):
            raise InvalidRange(f"Range of {days} days reaches past the earliest date")
        return _make_range(start, current)

    raise InvalidRange(f"Unknown range {selector!r}. Use a number of days or one of {', '.join(NAMED_RANGES)}.")
