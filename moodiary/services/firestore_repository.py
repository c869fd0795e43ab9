# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Firestore-backed entry store.

Layout:
    accounts/{account_id}                    field "streaks" holds the cache
    accounts/{account_id}/entries/{dateKey}  one document per day
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from moodiary.schemas.mood_schemas import MoodEntry, StreakCache
from moodiary.utils.errors import CacheWriteFailed, RepositoryUnavailable
from moodiary.utils.firebase import get_firestore_client

logger = logging.getLogger(__name__)

# Firestore field name -> cache key
STREAK_FIELDS = {
    "currentStreak": "current_streak",
    "longestStreak": "longest_streak",
    "lastCalculated": "last_calculated",
}


@contextmanager
def _guard(action: str, error_cls=RepositoryUnavailable):
    try:
        yield
    except google_exceptions.GoogleAPIError as e:
        logger.warning(f"⚠️ Firestore {action} failed: {e}")
        raise error_cls(f"Firestore {action} failed") from e


def _entry_from_doc(data: Dict[str, Any]) -> MoodEntry:
    return MoodEntry(
        date_key=data["dateKey"],
        mood_type=data["moodType"],
        note=data.get("note") or None,
    )


class FirestoreEntryRepository:
    def __init__(self, client=None):
        self.client = client if client is not None else get_firestore_client()

    def _account(self, account_id: str):
        return self.client.collection("accounts").document(account_id)

    def _entries(self, account_id: str):
        return self._account(account_id).collection("entries")

    # ---------------------- Entries ----------------------

    def fetch_range(self, account_id: str, start_key: str, end_key: str) -> List[MoodEntry]:
        with _guard("fetch_range"):
            query = (
                self._entries(account_id)
                .where(filter=FieldFilter("dateKey", ">=", start_key))
                .where(filter=FieldFilter("dateKey", "<=", end_key))
                .order_by("dateKey")
            )
            return [_entry_from_doc(doc.to_dict()) for doc in query.stream()]

    def fetch_all(self, account_id: str) -> List[MoodEntry]:
        with _guard("fetch_all"):
            return [_entry_from_doc(doc.to_dict()) for doc in self._entries(account_id).stream()]

    def fetch_day(self, account_id: str, date_key: str) -> Optional[MoodEntry]:
        with _guard("fetch_day"):
            doc = self._entries(account_id).document(date_key).get()
            return _entry_from_doc(doc.to_dict()) if doc.exists else None

    def upsert_entry(self, account_id: str, entry: MoodEntry) -> MoodEntry:
        with _guard("upsert_entry"):
            self._entries(account_id).document(entry.date_key).set({
                "dateKey": entry.date_key,
                "moodType": entry.mood_type,
                "note": entry.note or "",
            })
            return entry

    def delete_entry(self, account_id: str, date_key: str) -> bool:
        with _guard("delete_entry"):
            ref = self._entries(account_id).document(date_key)
            if not ref.get().exists:
                return False
            ref.delete()
            return True

    def list_account_ids(self) -> List[str]:
        with _guard("list_account_ids"):
            return [ref.id for ref in self.client.collection("accounts").list_documents()]

    # ---------------------- Streak cache ----------------------

    def read_streak_cache(self, account_id: str) -> Optional[Dict[str, Any]]:
        with _guard("read_streak_cache"):
            doc = self._account(account_id).get()
            if not doc.exists:
                return None
            streaks = (doc.to_dict() or {}).get("streaks")
            if not isinstance(streaks, dict):
                return None
            return {key: streaks[field] for field, key in STREAK_FIELDS.items() if field in streaks}

    def write_streak_cache(self, account_id: str, cache: StreakCache) -> None:
        with _guard("write_streak_cache", error_cls=CacheWriteFailed):
            self._account(account_id).set({
                "streaks": {
                    "currentStreak": cache.current_streak,
                    "longestStreak": cache.longest_streak,
                    "lastCalculated": cache.last_calculated,
                }
            }, merge=True)
