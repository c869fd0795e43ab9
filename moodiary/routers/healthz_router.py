# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends

from moodiary import config
from moodiary.auth import get_repo
from moodiary.utils.calendar_utils import today_key
from moodiary.utils.errors import RepositoryUnavailable

router = APIRouter(tags=["Infra"])


@router.get("/healthz")
def health_check(repo=Depends(get_repo)):
    result = {
        "store_connection": False,
        "store_backend": config.ENTRY_STORE,
        "timezone": config.TIMEZONE_NAME,
        "today": today_key(),
    }

    try:
        # ✅ Check store read
        repo.read_streak_cache("__healthz__")
        result["store_connection"] = True
        return {"status": "ok", "details": result}

    except RepositoryUnavailable as e:
        return {
            "status": "error",
            "error": str(e),
            "details": result
        }
