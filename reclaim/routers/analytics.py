"""
Analytics router — read-only dashboard data.

GET /analytics/habits/statistics        — headline counters
GET /analytics/habits/completion-rates  — per-habit completion rate in a window
GET /analytics/habits/calendar          — month grid of daily completion ratios
GET /analytics/mood/trends              — mood score per day + average
GET /analytics/mood/distribution        — count per mood category
GET /analytics/mood/calendar            — month grid of mood entries
GET /analytics/correlation              — mood on habit days vs. other days

Windows default to the 30 days ending today (UTC). A window whose end
precedes its start is accepted and reports zeros.
"""
from __future__ import annotations

import calendar
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from reclaim.core.config import settings
from reclaim.core.deps import get_current_user_id
from reclaim.core.errors import InvalidDateRangeError
from reclaim.db.base import get_db
from reclaim.schemas.analytics import (
    CalendarDayResponse,
    CompletionRatesResponse,
    CorrelationResponse,
    HabitCalendarResponse,
    HabitRateResponse,
    HabitStatisticsResponse,
    LongestStreakResponse,
    MoodCalendarDayResponse,
    MoodCalendarResponse,
    MoodDistributionResponse,
    MoodPointResponse,
    MoodTrendResponse,
)
from reclaim.schemas.common import error_responses
from reclaim.services import analytics
from reclaim.services.habit_service import today_utc
from reclaim.services.habit_store import HabitStore
from reclaim.services.mood_store import MoodStore

router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
    responses=error_responses(401, 422),
)


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------

def _resolve_range(
    start_date: Optional[date],
    end_date: Optional[date],
) -> tuple[date, date]:
    default_start, default_end = analytics.default_range(today_utc())
    start = start_date or default_start
    end = end_date or default_end
    if analytics.inclusive_days(start, end) > settings.MAX_RANGE_DAYS:
        raise InvalidDateRangeError(start, end, settings.MAX_RANGE_DAYS)
    return start, end


def _resolve_month(month: Optional[int], year: Optional[int]) -> tuple[int, int]:
    today = today_utc()
    return month or today.month, year or today.year


def _month_bounds(month: int, year: int) -> tuple[date, date]:
    _, last = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, last)


_START = Query(default=None, description="Window start (inclusive).", examples=["2026-02-01"])
_END = Query(default=None, description="Window end (inclusive).", examples=["2026-02-28"])


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------

@router.get(
    "/habits/statistics",
    response_model=HabitStatisticsResponse,
    summary="Headline habit counters",
)
def habit_statistics(
    today: Optional[date] = Query(
        default=None,
        description="Evaluation date for streaks and today's rate. Defaults to today (UTC).",
    ),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    `completion_rate_today_percent` = habits completed today / active habits.
    Streak figures are recomputed from completions, not read from the cache.
    """
    store = HabitStore(db)
    stats = analytics.statistics(
        store.list_by_user(user_id, include_done=True),
        store.list_user_completions(user_id),
        today or today_utc(),
        settings.STREAK_GRACE_YESTERDAY,
    )
    return HabitStatisticsResponse(
        total_habits=stats.total_habits,
        active_habits=stats.active_habits,
        completed_habits=stats.completed_habits,
        total_completions=stats.total_completions,
        active_streaks_count=stats.active_streaks_count,
        longest_streak=LongestStreakResponse(
            name=stats.longest_streak.name,
            days=stats.longest_streak.days,
        ),
        completed_today=stats.completed_today,
        completion_rate_today_percent=stats.completion_rate_today_percent,
    )


@router.get(
    "/habits/completion-rates",
    response_model=CompletionRatesResponse,
    summary="Completion rate per active habit over a window",
)
def habit_completion_rates(
    start_date: Optional[date] = _START,
    end_date: Optional[date] = _END,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    start, end = _resolve_range(start_date, end_date)
    store = HabitStore(db)
    rates = analytics.completion_rates(
        store.list_by_user(user_id),
        store.list_user_completions(user_id, start, end),
        start,
        end,
    )
    return CompletionRatesResponse(
        start_date=str(start),
        end_date=str(end),
        rates=[
            HabitRateResponse(
                habit_id=r.habit_id,
                name=r.name,
                completed_count=r.completed_count,
                total_days=r.total_days,
                rate_percent=r.rate_percent,
            )
            for r in rates
        ],
    )


@router.get(
    "/habits/calendar",
    response_model=HabitCalendarResponse,
    summary="Daily completion ratio for every day of a month",
)
def habit_calendar(
    month: Optional[int] = Query(default=None, ge=1, le=12),
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    The denominator for every day is the *current* active habit count,
    so past days are an approximation when habits were added later.
    """
    month, year = _resolve_month(month, year)
    first, last = _month_bounds(month, year)
    store = HabitStore(db)
    days = analytics.habit_calendar(
        store.list_by_user(user_id),
        store.list_user_completions(user_id, first, last),
        month,
        year,
    )
    return HabitCalendarResponse(
        month=month,
        year=year,
        days=[
            CalendarDayResponse(
                date=str(d.day),
                completed_count=d.completed_count,
                total_habit_count=d.total_habit_count,
                rate_percent=d.rate_percent,
                completed_habit_names=d.completed_habit_names,
            )
            for d in days
        ],
    )


# ---------------------------------------------------------------------------
# Moods
# ---------------------------------------------------------------------------

@router.get(
    "/mood/trends",
    response_model=MoodTrendResponse,
    summary="Mood score per day and the window average",
)
def mood_trends(
    start_date: Optional[date] = _START,
    end_date: Optional[date] = _END,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Scores: great=5, good=4, okay=3, bad=2, terrible=1."""
    start, end = _resolve_range(start_date, end_date)
    trend = analytics.mood_trend(MoodStore(db).list_by_user(user_id, start, end), start, end)
    return MoodTrendResponse(
        start_date=str(start),
        end_date=str(end),
        points=[MoodPointResponse(date=str(p.day), score=p.score) for p in trend.points],
        average=trend.average,
    )


@router.get(
    "/mood/distribution",
    response_model=MoodDistributionResponse,
    summary="Number of entries per mood category",
)
def mood_distribution(
    start_date: Optional[date] = _START,
    end_date: Optional[date] = _END,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    start, end = _resolve_range(start_date, end_date)
    counts = analytics.mood_distribution(
        MoodStore(db).list_by_user(user_id, start, end), start, end
    )
    return MoodDistributionResponse(**counts)


@router.get(
    "/mood/calendar",
    response_model=MoodCalendarResponse,
    summary="Mood entries of a month",
)
def mood_calendar(
    month: Optional[int] = Query(default=None, ge=1, le=12),
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Days without an entry are omitted; the client renders them as "no data"."""
    month, year = _resolve_month(month, year)
    first, last = _month_bounds(month, year)
    days = analytics.mood_calendar(
        MoodStore(db).list_by_user(user_id, first, last), month, year
    )
    return MoodCalendarResponse(
        month=month,
        year=year,
        days=[
            MoodCalendarDayResponse(
                date=str(d.day), mood=d.mood, emoji=d.emoji, has_note=d.has_note
            )
            for d in days
        ],
    )


# ---------------------------------------------------------------------------
# Correlation
# ---------------------------------------------------------------------------

@router.get(
    "/correlation",
    response_model=CorrelationResponse,
    summary="Average mood on days with vs. without habit completions",
)
def mood_habit_correlation(
    start_date: Optional[date] = _START,
    end_date: Optional[date] = _END,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Averages are `null` when a side has no mood entries; the insight text
    then asks for more data.
    """
    start, end = _resolve_range(start_date, end_date)
    result = analytics.correlation(
        MoodStore(db).list_by_user(user_id, start, end),
        HabitStore(db).list_user_completions(user_id, start, end),
        start,
        end,
    )
    return CorrelationResponse(
        start_date=str(start),
        end_date=str(end),
        average_mood_on_habit_days=result.average_mood_on_habit_days,
        average_mood_on_non_habit_days=result.average_mood_on_non_habit_days,
        habit_days=result.habit_days,
        non_habit_days=result.non_habit_days,
        insight=result.insight,
    )
