# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from moodiary import config
from moodiary.models import database
from moodiary.models import *  # registers all models
from moodiary.routers import entries_router, healthz_router, stats_router
from moodiary.utils.errors import InvalidDateKey, InvalidRange, RepositoryUnavailable
from moodiary.utils.rate_limit_utils import limiter
from moodiary.utils.schedulers.streak_refresh_cron import refresh_all_streak_caches

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Scheduler setup
scheduler = BackgroundScheduler(job_defaults={"misfire_grace_time": 600})


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.ENTRY_STORE == "sql":
        # Create DB tables in one go
        database.Base.metadata.create_all(bind=database.engine)

    # 🕛 Rebuild every streak cache just after midnight in the diary's zone
    scheduler.add_job(
        refresh_all_streak_caches, "cron",
        hour=config.STREAK_REFRESH_HOUR, minute=5, timezone=config.TIMEZONE,
    )
    scheduler.start()
    logger.info(f"🚀 Moodiary started (store={config.ENTRY_STORE}, tz={config.TIMEZONE_NAME})")
    yield
    scheduler.shutdown()


# Create FastAPI app with lifespan
app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="Moodiary API",
    description="Daily mood diary: entries, streaks and statistics",
    version="1.0"
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Include routers
app.include_router(entries_router.router)
app.include_router(stats_router.router)
app.include_router(healthz_router.router)


# ---------------------- ADDING EXCEPTION HANDLERS ----------------------
@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests. Please slow down."}
    )


@app.exception_handler(InvalidDateKey)
@app.exception_handler(InvalidRange)
async def invalid_input_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(RepositoryUnavailable)
async def repository_unavailable_handler(request: Request, exc: RepositoryUnavailable):
    logger.warning(f"⚠️ {request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": "Diary storage is unavailable. Please try again shortly."}
    )


@app.get("/")
def read_root():
    return {"message": "Welcome to Moodiary - daily mood diary backend Live"}


@app.get("/health", tags=["Infra"])
def health_check():
    return {"status": "ok"}
