# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from moodiary.config import DATABASE_URL


def build_engine(url: str):
    if url.startswith("sqlite"):
        # ✅ SQLite for local/dev, sessions are shared across FastAPI worker threads
        return create_engine(url, connect_args={"check_same_thread": False})

    # ✅ Pooled engine for hosted Postgres
    return create_engine(
        url,
        pool_size=10,          # Keep 10 connections open
        max_overflow=20,       # Allow 20 extra if under load
        pool_recycle=1800,     # Recycle every 30 mins
        pool_pre_ping=True     # Validate before using connection
    )


engine = build_engine(DATABASE_URL)

# ✅ Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ Base model
Base = declarative_base()
