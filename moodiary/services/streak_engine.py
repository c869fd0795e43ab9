# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Current / longest streak with a per-account cache.

The cache is derived data. It is read first, and rebuilt from the complete
entry history whenever it is missing, malformed, or was last calculated on an
earlier calendar day than today. Every entry mutation rebuilds it too. Since a
rebuild always starts from the full entry set, racing rebuilds converge.
"""

import logging
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from moodiary.schemas.mood_schemas import MoodEntry, StreakCache, StreakResult
from moodiary.utils.calendar_utils import add_days, date_key, now_local, parse_date_key, today
from moodiary.utils.errors import RepositoryUnavailable

logger = logging.getLogger(__name__)

CACHE_FIELDS = ("current_streak", "longest_streak", "last_calculated")


def calculate_current_streak(day_keys: Iterable[str], today_date: date) -> int:
    """
    Consecutive days ending today, or ending yesterday when today has no
    entry yet (grace day).
    """
    days = set(day_keys)
    if not days:
        return 0

    current = today_date
    if date_key(current) not in days:
        current = add_days(today_date, -1)
        if date_key(current) not in days:
            return 0

    streak = 0
    while date_key(current) in days:
        streak += 1
        current = add_days(current, -1)
    return streak


def calculate_longest_streak(day_keys: Iterable[str]) -> int:
    ordered = sorted(set(day_keys))
    if not ordered:
        return 0

    longest = current = 1
    previous = parse_date_key(ordered[0])
    for key in ordered[1:]:
        day = parse_date_key(key)
        current = current + 1 if day == add_days(previous, 1) else 1
        longest = max(longest, current)
        previous = day
    return longest


def compute_streak(entries: Iterable[MoodEntry], now: Optional[datetime] = None) -> StreakCache:
    day_keys = {entry.date_key for entry in entries}
    return StreakCache(
        current_streak=calculate_current_streak(day_keys, today(now)),
        longest_streak=calculate_longest_streak(day_keys),
        last_calculated=now_local(now),
    )


def parse_cache(raw: Optional[Mapping[str, Any]]) -> Optional[StreakCache]:
    """A StreakCache when every field is present and well-typed, else None."""
    if not raw or any(raw.get(field) is None for field in CACHE_FIELDS):
        return None
    try:
        return StreakCache.model_validate(dict(raw))
    except ValidationError:
        return None


def is_stale(cache: StreakCache, now: Optional[datetime] = None) -> bool:
    return today(cache.last_calculated) < today(now)


def recompute_and_store(repo, account_id: str, now: Optional[datetime] = None) -> StreakCache:
    """
    Rebuild both streaks from the complete entry set and overwrite the cache.
    Raises RepositoryUnavailable if the history cannot be read and
    CacheWriteFailed if the result cannot be persisted.
    """
    cache = compute_streak(repo.fetch_all(account_id), now)
    repo.write_streak_cache(account_id, cache)
    logger.info(
        f"🔁 Streak cache saved for account {account_id}: "
        f"current={cache.current_streak} longest={cache.longest_streak}"
    )
    return cache


def refresh_streak_on_entry_change(repo, account_id: str, now: Optional[datetime] = None) -> Optional[StreakCache]:
    """
    Called after an entry write has succeeded. Failures are logged and
    reported as None; they never undo the entry write.
    """
    try:
        return recompute_and_store(repo, account_id, now)
    except RepositoryUnavailable as e:
        logger.error(f"🛑 Streak refresh failed for account {account_id}: {e}", exc_info=True)
        return None


def get_streak(repo, account_id: Optional[str], now: Optional[datetime] = None) -> StreakResult:
    if not account_id:
        return StreakResult()

    try:
        cached = parse_cache(repo.read_streak_cache(account_id))
    except RepositoryUnavailable as e:
        logger.warning(f"⚠️ Streak cache read failed for account {account_id}: {e}")
        cached = None

    if cached and not is_stale(cached, now):
        return StreakResult(
            current_streak=cached.current_streak,
            longest_streak=cached.longest_streak,
            last_calculated=cached.last_calculated,
            from_cache=True,
        )

    logger.info(f"🧮 Streak cache {'stale' if cached else 'miss'} for account {account_id}, recalculating")
    try:
        entries = repo.fetch_all(account_id)
    except RepositoryUnavailable as e:
        warning = f"Entry history unavailable: {e}"
        if cached:
            # yesterday's figures beat zeros
            return StreakResult(
                current_streak=cached.current_streak,
                longest_streak=cached.longest_streak,
                last_calculated=cached.last_calculated,
                from_cache=True,
                warnings=[warning],
            )
        return StreakResult(warnings=[warning])

    fresh = compute_streak(entries, now)
    warnings = []
    try:
        repo.write_streak_cache(account_id, fresh)
    except RepositoryUnavailable as e:
        logger.warning(f"⚠️ Streak cache write failed for account {account_id}: {e}")
        warnings.append(f"Streak cache not saved: {e}")

    return StreakResult(
        current_streak=fresh.current_streak,
        longest_streak=fresh.longest_streak,
        last_calculated=fresh.last_calculated,
        from_cache=False,
        warnings=warnings,
    )
