# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from moodiary.utils.calendar_utils import parse_date_key

MOOD_TYPES = (1, 2, 3, 4, 5)

MOOD_LABELS = {
    1: "Very Bad",
    2: "Bad",
    3: "Okay",
    4: "Good",
    5: "Great",
}


class MoodEntry(BaseModel):
    """One record per calendar day per account."""
    model_config = ConfigDict(from_attributes=True)

    date_key: str
    mood_type: int = Field(ge=1, le=5)
    note: Optional[str] = None

    @field_validator("date_key")
    @classmethod
    def _canonical_date_key(cls, value: str) -> str:
        parse_date_key(value)
        return value


class EntryUpsertRequest(BaseModel):
    mood_type: int = Field(ge=1, le=5)
    note: Optional[str] = None


class StreakCache(BaseModel):
    current_streak: int = Field(ge=0)
    longest_streak: int = Field(ge=0)
    last_calculated: datetime


class StreakResult(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    from_cache: bool = False
    last_calculated: Optional[datetime] = None
    warnings: List[str] = []


class SaveEntryResponse(BaseModel):
    entry: Optional[MoodEntry] = None
    deleted: bool = False
    streak_updated: bool
    streak: Optional[StreakCache] = None


# ---------------------- Aggregates ----------------------

class MoodDistribution(BaseModel):
    counts: Dict[int, int]
    # percent of the largest bucket, for bar heights
    heights: Dict[int, float]
    max_count: int


class TrendPoint(BaseModel):
    date_key: str
    mood: float


class WeekdayStat(BaseModel):
    day: str
    average: float
    entries: int


class BestWorstDays(BaseModel):
    best: Optional[WeekdayStat] = None
    worst: Optional[WeekdayStat] = None


class DominantMood(BaseModel):
    mood_type: int
    label: str
    count: int
    percentage: int


class LoggingRate(BaseModel):
    logged_days: int
    total_days: int
    percentage: int


class WeekOverWeek(BaseModel):
    current_average: Optional[float] = None
    previous_average: Optional[float] = None
    delta: Optional[float] = None
    enough_data: bool = False


class DateRange(BaseModel):
    start_key: str
    end_key: str
    total_days: int


class StatsReport(BaseModel):
    range: DateRange
    total_entries: int
    average_mood: Optional[float] = None
    distribution: MoodDistribution
    trend: List[TrendPoint]
    best_worst: BestWorstDays
    dominant_mood: Optional[DominantMood] = None
    logging_rate: LoggingRate
    week_over_week: WeekOverWeek
    entries_last_7_days: int = 0
    entries_this_month: int = 0
    warnings: List[str] = []
