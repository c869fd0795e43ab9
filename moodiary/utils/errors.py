# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


class MoodiaryError(Exception):
    """Base class for every error the analytics engine reports."""


class InvalidDateKey(MoodiaryError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid date key {value!r}. Use YYYY-MM-DD.")


class InvalidRange(MoodiaryError, ValueError):
    pass


class RepositoryUnavailable(MoodiaryError):
    """Entry store read/write failed (network, permission, driver errors)."""


class CacheWriteFailed(RepositoryUnavailable):
    """Streak values were computed but could not be persisted."""
