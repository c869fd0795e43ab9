# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Pure statistics over a list of mood entries.

Nothing here touches the store or the clock; callers pass ``today`` where a
calculation is anchored to it. Same input, same output.
"""

import math
from collections import Counter, defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence

from moodiary.schemas.mood_schemas import (
    MOOD_LABELS,
    MOOD_TYPES,
    BestWorstDays,
    DominantMood,
    LoggingRate,
    MoodDistribution,
    MoodEntry,
    TrendPoint,
    WeekdayStat,
    WeekOverWeek,
)
from moodiary.utils.calendar_utils import WEEKDAY_NAMES, add_days, date_key, parse_date_key, weekday_index


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _round_one_decimal(value: float) -> float:
    """One decimal, halves away from zero: 3.25 -> 3.3, -0.25 -> -0.3."""
    rounded = math.floor(abs(value) * 10 + 0.5) / 10
    return -rounded if value < 0 and rounded else rounded


def average_mood(entries: Sequence[MoodEntry]) -> Optional[float]:
    if not entries:
        return None
    return _round_one_decimal(sum(e.mood_type for e in entries) / len(entries))


def mood_distribution(entries: Sequence[MoodEntry]) -> MoodDistribution:
    counts: Dict[int, int] = {mood: 0 for mood in MOOD_TYPES}
    for entry in entries:
        if entry.mood_type in counts:
            counts[entry.mood_type] += 1

    # Heights are relative to the tallest bar, not to the total
    max_count = max(counts.values())
    heights = {
        mood: (count / max_count * 100 if max_count else 0.0)
        for mood, count in counts.items()
    }
    return MoodDistribution(counts=counts, heights=heights, max_count=max_count)


def daily_trend(entries: Sequence[MoodEntry]) -> List[TrendPoint]:
    """One point per date that has data; gaps are not filled."""
    sums: Dict[str, List[int]] = defaultdict(lambda: [0, 0])
    for entry in entries:
        bucket = sums[entry.date_key]
        bucket[0] += entry.mood_type
        bucket[1] += 1

    return [
        TrendPoint(date_key=key, mood=total / count)
        for key, (total, count) in sorted(sums.items())
    ]


def best_worst_weekdays(entries: Sequence[MoodEntry]) -> BestWorstDays:
    """
    Highest and lowest average mood per weekday. Buckets are visited Sunday
    through Saturday; on a tie the earlier weekday wins, whatever order the
    entries arrive in.
    """
    buckets: Dict[int, List[int]] = {}
    for entry in entries:
        bucket = buckets.setdefault(weekday_index(parse_date_key(entry.date_key)), [0, 0])
        bucket[0] += entry.mood_type
        bucket[1] += 1

    best = worst = None
    for index, (total, count) in sorted(buckets.items()):
        stat = WeekdayStat(day=WEEKDAY_NAMES[index], average=total / count, entries=count)
        if best is None or stat.average > best.average:
            best = stat
        if worst is None or stat.average < worst.average:
            worst = stat
    return BestWorstDays(best=best, worst=worst)


def dominant_mood(entries: Sequence[MoodEntry]) -> Optional[DominantMood]:
    if not entries:
        return None

    counts = Counter(entry.mood_type for entry in entries)
    mood_type, count = None, 0
    # lowest mood type wins a tie
    for mood, n in sorted(counts.items()):
        if n > count:
            mood_type, count = mood, n

    return DominantMood(
        mood_type=mood_type,
        label=MOOD_LABELS.get(mood_type, str(mood_type)),
        count=count,
        percentage=_round_half_up(count / len(entries) * 100),
    )


def logging_rate(entries: Sequence[MoodEntry], total_days: int) -> LoggingRate:
    logged_days = len({entry.date_key for entry in entries})
    percentage = _round_half_up(logged_days / total_days * 100) if total_days > 0 else 0
    return LoggingRate(logged_days=logged_days, total_days=total_days, percentage=percentage)


def week_over_week(entries: Sequence[MoodEntry], today_date: date) -> WeekOverWeek:
    """
    Average of [today-6, today] minus average of [today-13, today-7].
    """
    current_start = date_key(add_days(today_date, -6))
    previous_start = date_key(add_days(today_date, -13))
    end = date_key(today_date)

    current = [e for e in entries if current_start <= e.date_key <= end]
    previous = [e for e in entries if previous_start <= e.date_key < current_start]

    if not current or not previous:
        return WeekOverWeek(
            current_average=average_mood(current),
            previous_average=average_mood(previous),
        )

    current_avg = sum(e.mood_type for e in current) / len(current)
    previous_avg = sum(e.mood_type for e in previous) / len(previous)
    return WeekOverWeek(
        current_average=_round_one_decimal(current_avg),
        previous_average=_round_one_decimal(previous_avg),
        delta=_round_one_decimal(current_avg - previous_avg),
        enough_data=True,
    )


def count_between(entries: Sequence[MoodEntry], start: date, end: date) -> int:
    start_key, end_key = date_key(start), date_key(end)
    return sum(1 for e in entries if start_key <= e.date_key <= end_key)
