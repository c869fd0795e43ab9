# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import Optional

from fastapi import Depends, Header, HTTPException

from moodiary.services.entry_repository import get_repository
from moodiary.utils.jwt_utils import verify_access_token


def get_repo():
    return get_repository()


# ✅ Account id from the bearer token; no header means "no account"
def get_account_id(authorization: Optional[str] = Header(None)) -> Optional[str]:
    if not authorization:
        return None
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization format")
    token = authorization.replace("Bearer ", "", 1)
    payload = verify_access_token(token)
    sub = payload.get("sub")
    return str(sub) if sub else None


def require_account_id(account_id: Optional[str] = Depends(get_account_id)) -> str:
    if not account_id:
        raise HTTPException(status_code=401, detail="❌ Sign in to save entries")
    return account_id
