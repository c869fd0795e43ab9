# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
import time
from datetime import datetime
from typing import Optional

from moodiary.services.entry_repository import get_repository
from moodiary.services.streak_engine import recompute_and_store
from moodiary.utils.errors import RepositoryUnavailable

logger = logging.getLogger("streak_refresh")


def refresh_all_streak_caches(repo=None, now: Optional[datetime] = None) -> int:
    """
    Nightly rebuild of every account's streak cache, so a streak that broke
    at midnight reads correctly before the next entry is saved.
    Returns the number of accounts refreshed.
    """
    repo = repo or get_repository()
    start = time.time()
    logger.info("🔁 Starting nightly streak refresh...")

    try:
        account_ids = repo.list_account_ids()
    except RepositoryUnavailable as e:
        logger.error(f"🛑 Streak refresh could not list accounts: {e}", exc_info=True)
        return 0

    refreshed = 0
    for account_id in account_ids:
        try:
            recompute_and_store(repo, account_id, now)
            refreshed += 1
        except RepositoryUnavailable as e:
            logger.warning(f"⚠️ Streak refresh failed for account {account_id}: {e}")

    duration = round(time.time() - start, 2)
    logger.info(f"✅ Streak refresh completed: {refreshed}/{len(account_ids)} accounts in {duration} sec.")
    return refreshed
