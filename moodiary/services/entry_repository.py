# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
SQL-backed entry store.

The analytics engine only needs a keyed record store: entries addressed by
``(account_id, date_key)`` and one streak cache record per account. Writes are
last-write-wins upserts; nothing here takes locks or checks versions.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytz
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from moodiary import config
from moodiary.models.database import SessionLocal
from moodiary.models.mood_entry import MoodEntryRecord
from moodiary.models.streak_cache import StreakCacheRecord
from moodiary.schemas.mood_schemas import MoodEntry, StreakCache
from moodiary.utils.errors import CacheWriteFailed, RepositoryUnavailable

logger = logging.getLogger(__name__)


def _to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.utc).replace(tzinfo=None)


class SqlEntryRepository:
    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    @contextmanager
    def _session(self, action: str, error_cls=RepositoryUnavailable):
        db: Session = self.session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"⚠️ Entry store {action} failed: {e}")
            raise error_cls(f"Entry store {action} failed") from e
        finally:
            db.close()

    # ---------------------- Entries ----------------------

    def fetch_range(self, account_id: str, start_key: str, end_key: str) -> List[MoodEntry]:
        with self._session("fetch_range") as db:
            records = (
                db.query(MoodEntryRecord)
                .filter(
                    MoodEntryRecord.account_id == account_id,
                    MoodEntryRecord.date_key >= start_key,
                    MoodEntryRecord.date_key <= end_key,
                )
                .order_by(MoodEntryRecord.date_key)
                .all()
            )
            return [MoodEntry.model_validate(r) for r in records]

    def fetch_all(self, account_id: str) -> List[MoodEntry]:
        with self._session("fetch_all") as db:
            records = (
                db.query(MoodEntryRecord)
                .filter(MoodEntryRecord.account_id == account_id)
                .order_by(MoodEntryRecord.date_key)
                .all()
            )
            return [MoodEntry.model_validate(r) for r in records]

    def fetch_day(self, account_id: str, date_key: str) -> Optional[MoodEntry]:
        with self._session("fetch_day") as db:
            record = db.query(MoodEntryRecord).filter_by(account_id=account_id, date_key=date_key).first()
            return MoodEntry.model_validate(record) if record else None

    def upsert_entry(self, account_id: str, entry: MoodEntry) -> MoodEntry:
        with self._session("upsert_entry") as db:
            record = db.query(MoodEntryRecord).filter_by(account_id=account_id, date_key=entry.date_key).first()
            if record:
                record.mood_type = entry.mood_type
                record.note = entry.note
            else:
                record = MoodEntryRecord(
                    account_id=account_id,
                    date_key=entry.date_key,
                    mood_type=entry.mood_type,
                    note=entry.note,
                )
                db.add(record)
            db.commit()
            return entry

    def delete_entry(self, account_id: str, date_key: str) -> bool:
        with self._session("delete_entry") as db:
            count = (
                db.query(MoodEntryRecord)
                .filter_by(account_id=account_id, date_key=date_key)
                .delete(synchronize_session=False)
            )
            db.commit()
            return count > 0

    def list_account_ids(self) -> List[str]:
        with self._session("list_account_ids") as db:
            rows = db.query(MoodEntryRecord.account_id).distinct().all()
            return [row[0] for row in rows]

    # ---------------------- Streak cache ----------------------

    def read_streak_cache(self, account_id: str) -> Optional[Dict[str, Any]]:
        """Raw cache fields; structural validation is the caller's job."""
        with self._session("read_streak_cache") as db:
            record = db.query(StreakCacheRecord).filter_by(account_id=account_id).first()
            if not record:
                return None
            return {
                "current_streak": record.current_streak,
                "longest_streak": record.longest_streak,
                "last_calculated": record.last_calculated,
            }

    def write_streak_cache(self, account_id: str, cache: StreakCache) -> None:
        with self._session("write_streak_cache", error_cls=CacheWriteFailed) as db:
            record = db.get(StreakCacheRecord, account_id)
            if not record:
                record = StreakCacheRecord(account_id=account_id)
                db.add(record)
            record.current_streak = cache.current_streak
            record.longest_streak = cache.longest_streak
            record.last_calculated = _to_utc_naive(cache.last_calculated)
            db.commit()


def get_repository():
    """Repository for the configured ENTRY_STORE backend."""
    if config.ENTRY_STORE == "firestore":
        from moodiary.services.firestore_repository import FirestoreEntryRepository
        return FirestoreEntryRepository()
    if config.ENTRY_STORE != "sql":
        raise ValueError(f"Unknown ENTRY_STORE {config.ENTRY_STORE!r}, expected 'sql' or 'firestore'")
    return SqlEntryRepository()
