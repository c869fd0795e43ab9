# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
import pytz

# ✅ Only load .env in local/dev
if os.environ.get("ENV") != "production":
    from dotenv import load_dotenv
    load_dotenv()

ENV = os.getenv("ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./moodiary.db")

# 🌏 Single authoritative calendar for "which day is today"
TIMEZONE_NAME = os.getenv("MOODIARY_TIMEZONE", "Asia/Ho_Chi_Minh")
try:
    TIMEZONE = pytz.timezone(TIMEZONE_NAME)
except pytz.UnknownTimeZoneError as e:
    raise ValueError(f"MOODIARY_TIMEZONE is not a valid IANA zone: {TIMEZONE_NAME!r}") from e

# "sql" or "firestore"
ENTRY_STORE = os.getenv("ENTRY_STORE", "sql").lower()

FIREBASE_ADMIN_JSON = os.getenv("FIREBASE_ADMIN_JSON")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    if ENV == "production":
        raise RuntimeError("JWT_SECRET_KEY environment variable is not set.")
    JWT_SECRET_KEY = "moodiary-dev-secret"

FERNET_SECRET = os.getenv("FERNET_SECRET")

RATE_LIMIT = os.getenv("RATE_LIMIT", "60/minute")

STREAK_REFRESH_HOUR = int(os.getenv("STREAK_REFRESH_HOUR", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
