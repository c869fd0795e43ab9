"""Tests for the SQL entry store."""

from datetime import datetime

import pytest
import pytz
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from moodiary.schemas.mood_schemas import MoodEntry, StreakCache
from moodiary.services.entry_repository import SqlEntryRepository
from moodiary.utils.errors import CacheWriteFailed, RepositoryUnavailable


def test_upsert_creates_then_overwrites(repo):
    repo.upsert_entry("alice", MoodEntry(date_key="2024-01-01", mood_type=2, note="meh"))
    repo.upsert_entry("alice", MoodEntry(date_key="2024-01-01", mood_type=5, note="better"))

    stored = repo.fetch_all("alice")
    assert len(stored) == 1
    assert stored[0].mood_type == 5
    assert stored[0].note == "better"


def test_notes_are_encrypted_at_rest(repo, engine):
    repo.upsert_entry("alice", MoodEntry(date_key="2024-01-01", mood_type=3, note="secret diary"))
    with engine.connect() as conn:
        raw = conn.execute(text("SELECT note FROM mood_entries")).scalar()
    assert raw and "secret diary" not in raw
    assert repo.fetch_day("alice", "2024-01-01").note == "secret diary"


def test_fetch_range_is_inclusive_and_ordered(repo):
    for key in ["2024-01-05", "2024-01-01", "2024-01-03", "2023-12-31", "2024-01-06"]:
        repo.upsert_entry("alice", MoodEntry(date_key=key, mood_type=3))

    keys = [e.date_key for e in repo.fetch_range("alice", "2024-01-01", "2024-01-05")]
    assert keys == ["2024-01-01", "2024-01-03", "2024-01-05"]


def test_accounts_are_isolated(repo):
    repo.upsert_entry("alice", MoodEntry(date_key="2024-01-01", mood_type=1))
    repo.upsert_entry("bob", MoodEntry(date_key="2024-01-01", mood_type=5))

    assert [e.mood_type for e in repo.fetch_all("alice")] == [1]
    assert repo.fetch_day("bob", "2024-01-01").mood_type == 5
    assert sorted(repo.list_account_ids()) == ["alice", "bob"]


def test_fetch_day_missing(repo):
    assert repo.fetch_day("alice", "2024-01-01") is None


def test_delete_entry(repo):
    repo.upsert_entry("alice", MoodEntry(date_key="2024-01-01", mood_type=1))
    assert repo.delete_entry("alice", "2024-01-01") is True
    assert repo.delete_entry("alice", "2024-01-01") is False
    assert repo.fetch_all("alice") == []


def test_streak_cache_round_trip_in_utc(repo):
    saigon = pytz.timezone("Asia/Ho_Chi_Minh")
    calculated = saigon.localize(datetime(2024, 1, 5, 8, 30))
    repo.write_streak_cache("alice", StreakCache(current_streak=2, longest_streak=7, last_calculated=calculated))
    repo.write_streak_cache("alice", StreakCache(current_streak=3, longest_streak=7, last_calculated=calculated))

    raw = repo.read_streak_cache("alice")
    assert raw["current_streak"] == 3
    assert raw["longest_streak"] == 7
    assert raw["last_calculated"] == datetime(2024, 1, 5, 1, 30)


def test_missing_streak_cache(repo):
    assert repo.read_streak_cache("nobody") is None


# ---- failures ----


class BrokenSession:
    def query(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    def get(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    def rollback(self):
        pass

    def close(self):
        pass


def test_read_errors_become_repository_unavailable():
    broken = SqlEntryRepository(BrokenSession)
    with pytest.raises(RepositoryUnavailable):
        broken.fetch_range("alice", "2024-01-01", "2024-01-05")
    with pytest.raises(RepositoryUnavailable):
        broken.fetch_all("alice")


def test_cache_write_errors_become_cache_write_failed(now):
    broken = SqlEntryRepository(BrokenSession)
    with pytest.raises(CacheWriteFailed):
        broken.write_streak_cache("alice", StreakCache(current_streak=0, longest_streak=0, last_calculated=now))
