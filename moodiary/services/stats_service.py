# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from datetime import datetime
from typing import List, Optional, Union

from moodiary.schemas.mood_schemas import DateRange, MoodEntry, StatsReport
from moodiary.services import aggregation_engine as agg
from moodiary.services.entry_service import dedupe_by_date_key
from moodiary.services.range_resolver import resolve_range
from moodiary.utils.calendar_utils import add_days, date_key, month_start, today
from moodiary.utils.errors import RepositoryUnavailable

logger = logging.getLogger(__name__)


def _build_report(
    date_range: DateRange,
    entries: List[MoodEntry],
    recent: List[MoodEntry],
    now: Optional[datetime],
    warnings: List[str],
) -> StatsReport:
    current = today(now)
    return StatsReport(
        range=date_range,
        total_entries=len(entries),
        average_mood=agg.average_mood(entries),
        distribution=agg.mood_distribution(entries),
        trend=agg.daily_trend(entries),
        best_worst=agg.best_worst_weekdays(entries),
        dominant_mood=agg.dominant_mood(entries),
        logging_rate=agg.logging_rate(entries, date_range.total_days),
        week_over_week=agg.week_over_week(recent, current),
        entries_last_7_days=agg.count_between(recent, add_days(current, -6), current),
        entries_this_month=agg.count_between(recent, month_start(current), current),
        warnings=warnings,
    )


def build_stats_report(
    repo,
    account_id: Optional[str],
    selector: Union[str, int] = "30",
    start_key: Optional[str] = None,
    end_key: Optional[str] = None,
    now: Optional[datetime] = None,
) -> StatsReport:
    """
    Resolve the range, load its entries and aggregate them. Bad input raises
    before the store is touched; a store failure yields an empty report with
    a warning instead of an error.
    """
    date_range = resolve_range(selector, start_key, end_key, now)

    if not account_id:
        return _build_report(date_range, [], [], now, [])

    current = today(now)
    # week-over-week and the summary counters look at the last two weeks and
    # this month, independent of the selected range
    recent_start = min(add_days(current, -13), month_start(current))

    try:
        entries = dedupe_by_date_key(repo.fetch_range(account_id, date_range.start_key, date_range.end_key))
        recent = dedupe_by_date_key(repo.fetch_range(account_id, date_key(recent_start), date_key(current)))
    except RepositoryUnavailable as e:
        logger.warning(f"⚠️ Stats for account {account_id} degraded to empty: {e}")
        return _build_report(date_range, [], [], now, [f"Entries unavailable: {e}"])

    logger.info(
        f"📊 Loaded {len(entries)} entries for account {account_id} "
        f"({date_range.start_key} to {date_range.end_key})"
    )
    return _build_report(date_range, entries, recent, now, [])
