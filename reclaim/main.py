import logging

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from reclaim.db.base import get_db
from reclaim.core.config import settings
from reclaim.core.logging_config import configure_logging
from reclaim.routers import habits as habits_router
from reclaim.routers import moods as moods_router
from reclaim.routers import analytics as analytics_router
from reclaim.core.errors import (
    ReclaimException,
    reclaim_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Reclaim Wellness API",
    description=(
        "**Habit streaks, milestone rewards and wellness analytics**\n\n"
        "Tracks per-day habit completions, derives streaks from history and "
        "reports habit / mood analytics for the dashboard.\n\n"
        "Every request is scoped by the `X-User-Id` header. "
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(ReclaimException, reclaim_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(habits_router.router)
app.include_router(moods_router.router)
app.include_router(analytics_router.router)

logger.info("Reclaim API started (env=%s)", settings.APP_ENV)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        logger.warning("Health check: database unreachable", exc_info=True)
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
