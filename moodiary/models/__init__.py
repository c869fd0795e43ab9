# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


from .mood_entry import MoodEntryRecord
from .streak_cache import StreakCacheRecord
