# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from moodiary.schemas.mood_schemas import MoodEntry, SaveEntryResponse
from moodiary.services.streak_engine import refresh_streak_on_entry_change
from moodiary.utils.calendar_utils import date_key, month_bounds, parse_date_key
from moodiary.utils.errors import InvalidRange

logger = logging.getLogger(__name__)


def dedupe_by_date_key(entries: Iterable[MoodEntry]) -> List[MoodEntry]:
    """One entry per day (the last one seen wins), ordered by date key."""
    by_day: Dict[str, MoodEntry] = {}
    for entry in entries:
        by_day[entry.date_key] = entry
    return [by_day[key] for key in sorted(by_day)]


def save_entry(repo, account_id: str, entry: MoodEntry, now: Optional[datetime] = None) -> SaveEntryResponse:
    """
    Upsert the day's entry, then rebuild the streak cache. A failed rebuild
    shows up as streak_updated=False; the entry itself stays saved.
    """
    saved = repo.upsert_entry(account_id, entry)
    logger.info(f"📝 Entry {entry.date_key} saved for account {account_id} (mood {entry.mood_type})")

    cache = refresh_streak_on_entry_change(repo, account_id, now)
    return SaveEntryResponse(entry=saved, streak_updated=cache is not None, streak=cache)


def delete_entry(repo, account_id: str, key: str, now: Optional[datetime] = None) -> SaveEntryResponse:
    parse_date_key(key)
    deleted = repo.delete_entry(account_id, key)
    if not deleted:
        return SaveEntryResponse(deleted=False, streak_updated=False)

    logger.info(f"🗑️ Entry {key} deleted for account {account_id}")
    cache = refresh_streak_on_entry_change(repo, account_id, now)
    return SaveEntryResponse(deleted=True, streak_updated=cache is not None, streak=cache)


def get_entry(repo, account_id: Optional[str], key: str) -> Optional[MoodEntry]:
    parse_date_key(key)
    if not account_id:
        return None
    return repo.fetch_day(account_id, key)


def list_entries(repo, account_id: Optional[str], start_key: str, end_key: str) -> List[MoodEntry]:
    if parse_date_key(start_key) > parse_date_key(end_key):
        raise InvalidRange(f"Start date {start_key} is after end date {end_key}")
    if not account_id:
        return []
    return dedupe_by_date_key(repo.fetch_range(account_id, start_key, end_key))


def month_entries(repo, account_id: Optional[str], year: int, month: int) -> Dict[str, MoodEntry]:
    """Entries of one calendar month keyed by date key, for the calendar grid."""
    first, last = month_bounds(year, month)
    entries = list_entries(repo, account_id, date_key(first), date_key(last))
    return {entry.date_key: entry for entry in entries}
