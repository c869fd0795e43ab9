# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

from slowapi import Limiter
from slowapi.util import get_remote_address

from moodiary.config import RATE_LIMIT

limiter = Limiter(key_func=get_remote_address)

# Applied to entry writes; reads are cheap and unlimited
WRITE_LIMIT = RATE_LIMIT
