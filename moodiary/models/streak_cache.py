# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, String, DateTime
from moodiary.models.database import Base

class StreakCacheRecord(Base):
    """Derived data, always rebuildable from mood_entries."""
    __tablename__ = "streak_caches"

    account_id = Column(String, primary_key=True)
    current_streak = Column(Integer, nullable=True)
    longest_streak = Column(Integer, nullable=True)
    last_calculated = Column(DateTime, nullable=True)  # naive UTC
