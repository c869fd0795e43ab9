# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from moodiary.auth import get_account_id, get_repo, require_account_id
from moodiary.schemas.mood_schemas import EntryUpsertRequest, MoodEntry, SaveEntryResponse
from moodiary.services import entry_service
from moodiary.utils.calendar_utils import parse_date_key
from moodiary.utils.rate_limit_utils import WRITE_LIMIT, limiter

router = APIRouter(tags=["Entries"])


@router.put("/entries/{date_key}", response_model=SaveEntryResponse)
@limiter.limit(WRITE_LIMIT)
def save_entry(
    request: Request,
    date_key: str,
    payload: EntryUpsertRequest,
    account_id: str = Depends(require_account_id),
    repo=Depends(get_repo),
):
    parse_date_key(date_key)
    entry = MoodEntry(date_key=date_key, mood_type=payload.mood_type, note=payload.note)
    return entry_service.save_entry(repo, account_id, entry)


@router.delete("/entries/{date_key}", response_model=SaveEntryResponse)
@limiter.limit(WRITE_LIMIT)
def delete_entry(
    request: Request,
    date_key: str,
    account_id: str = Depends(require_account_id),
    repo=Depends(get_repo),
):
    result = entry_service.delete_entry(repo, account_id, date_key)
    if not result.deleted:
        raise HTTPException(status_code=404, detail=f"No entry for {date_key}")
    return result


@router.get("/entries/{date_key}", response_model=MoodEntry)
def read_entry(
    date_key: str,
    account_id: Optional[str] = Depends(get_account_id),
    repo=Depends(get_repo),
):
    entry = entry_service.get_entry(repo, account_id, date_key)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No entry for {date_key}")
    return entry


@router.get("/entries", response_model=List[MoodEntry])
def list_entries(
    start: str = Query(..., description="Start date in YYYY-MM-DD format"),
    end: str = Query(..., description="End date in YYYY-MM-DD format"),
    account_id: Optional[str] = Depends(get_account_id),
    repo=Depends(get_repo),
):
    return entry_service.list_entries(repo, account_id, start, end)


@router.get("/calendar/{year}/{month}", response_model=Dict[str, MoodEntry])
def calendar_month(
    year: int,
    month: int,
    account_id: Optional[str] = Depends(get_account_id),
    repo=Depends(get_repo),
):
    """
    Entries of one month keyed by date key, for the calendar grid.
    """
    return entry_service.month_entries(repo, account_id, year, month)
