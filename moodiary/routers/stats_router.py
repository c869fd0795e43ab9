# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Optional

from fastapi import APIRouter, Depends, Query

from moodiary.auth import get_account_id, get_repo
from moodiary.schemas.mood_schemas import StatsReport, StreakResult
from moodiary.services.stats_service import build_stats_report
from moodiary.services.streak_engine import get_streak

router = APIRouter(tags=["Stats"])


@router.get("/streak", response_model=StreakResult)
def read_streak(
    account_id: Optional[str] = Depends(get_account_id),
    repo=Depends(get_repo),
):
    return get_streak(repo, account_id)


@router.get("/stats", response_model=StatsReport)
def read_stats(
    range_: str = Query("30", alias="range", description="7, 30, any N, week, month or custom"),
    start: Optional[str] = Query(None, description="Custom range start, YYYY-MM-DD"),
    end: Optional[str] = Query(None, description="Custom range end, YYYY-MM-DD"),
    account_id: Optional[str] = Depends(get_account_id),
    repo=Depends(get_repo),
):
    """
    Distribution, trend, weekday highs/lows, logging rate and
    week-over-week change for the selected range.
    """
    return build_stats_report(repo, account_id, range_, start, end)
