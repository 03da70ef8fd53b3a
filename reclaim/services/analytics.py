"""
Analytics Aggregator — read-side reporting over habits, completions and moods.

Every function is pure: it takes already-loaded records plus explicit dates
and never touches the database. Records are duck-typed:

  habit       .id  .name  .status
  completion  .habit_id  .completed_date
  mood entry  .entry_date  .mood  .note  (.emoji optional)

Empty inputs and zero-length ranges produce zeroed results; nothing here
raises on missing data.

Public API
----------
completion_rates(habits, completions, start, end)  -> list[HabitRate]
habit_calendar(habits, completions, month, year)   -> list[CalendarDay]
statistics(habits, completions, today)             -> HabitStatistics
mood_trend(entries, start, end)                    -> MoodTrend
mood_distribution(entries, start, end)             -> dict[str, int]
mood_calendar(entries, month, year)                -> list[MoodCalendarDay]
correlation(entries, completions, start, end)      -> MoodHabitCorrelation
"""
from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from reclaim.models import enum_value
from reclaim.models.habit import HabitStatus
from reclaim.models.mood_entry import Mood, MOOD_EMOJI
from reclaim.services.streak_engine import (
    compute_current_streak,
    compute_longest_streak,
    is_completed_today,
)


MOOD_SCORES: dict[str, int] = {
    Mood.great.value: 5,
    Mood.good.value: 4,
    Mood.okay.value: 3,
    Mood.bad.value: 2,
    Mood.terrible.value: 1,
}

INSIGHT_POSITIVE = (
    "You tend to feel better on days you complete your habits. Keep it up!"
)
INSIGHT_NEGATIVE = (
    "Your mood has been higher on days without habit completions. "
    "Try pairing habits with activities you enjoy."
)
INSIGHT_NEUTRAL = "Your mood is about the same whether or not you complete habits."
INSIGHT_NO_DATA = (
    "Not enough data yet. Log your mood and complete habits "
    "to see how they relate."
)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class HabitRate:
    habit_id: str
    name: str
    completed_count: int
    total_days: int
    rate_percent: float


@dataclass
class CalendarDay:
    day: date
    completed_count: int
    total_habit_count: int
    rate_percent: float
    completed_habit_names: list[str]


@dataclass
class LongestStreak:
    name: Optional[str]
    days: int


@dataclass
class HabitStatistics:
    total_habits: int
    active_habits: int
    completed_habits: int
    total_completions: int
    active_streaks_count: int
    longest_streak: LongestStreak
    completed_today: int
    completion_rate_today_percent: float


@dataclass
class MoodPoint:
    day: date
    score: int


@dataclass
class MoodTrend:
    points: list[MoodPoint]
    average: float


@dataclass
class MoodCalendarDay:
    day: date
    mood: str
    emoji: str
    has_note: bool


@dataclass
class MoodHabitCorrelation:
    average_mood_on_habit_days: Optional[float]
    average_mood_on_non_habit_days: Optional[float]
    habit_days: int          # days with a mood entry and >=1 completion
    non_habit_days: int      # days with a mood entry and no completion
    insight: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float | Decimal, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round_half_up(Decimal(part) * 100 / Decimal(whole), 1)


def inclusive_days(start: date, end: date) -> int:
    """Day count of [start, end]; 0 when end precedes start."""
    return max((end - start).days + 1, 0)


def _in_range(d: date, start: date, end: date) -> bool:
    return start <= d <= end


def _month_days(month: int, year: int) -> list[date]:
    _, last = calendar.monthrange(year, month)
    return [date(year, month, n) for n in range(1, last + 1)]


def _dates_by_habit(completions: Iterable) -> dict[str, set[date]]:
    by_habit: dict[str, set[date]] = defaultdict(set)
    for c in completions:
        by_habit[c.habit_id].add(c.completed_date)
    return by_habit


def mood_score(mood) -> int:
    return MOOD_SCORES[enum_value(mood)]


def _entries_in_range(entries: Iterable, start: date, end: date) -> list:
    return sorted(
        (e for e in entries if _in_range(e.entry_date, start, end)),
        key=lambda e: e.entry_date,
    )


def _average(scores: list[int]) -> Optional[float]:
    if not scores:
        return None
    return round_half_up(Decimal(sum(scores)) / Decimal(len(scores)), 2)


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------

def completion_rates(
    habits: Iterable,
    completions: Iterable,
    start: date,
    end: date,
) -> list[HabitRate]:
    """Per-habit share of days in [start, end] that were completed."""
    total_days = inclusive_days(start, end)
    by_habit = _dates_by_habit(completions)

    rates = []
    for habit in habits:
        done = sum(1 for d in by_habit.get(habit.id, ()) if _in_range(d, start, end))
        rates.append(HabitRate(
            habit_id=habit.id,
            name=habit.name,
            completed_count=done,
            total_days=total_days,
            rate_percent=_percent(done, total_days),
        ))
    return rates


def habit_calendar(
    habits: Iterable,
    completions: Iterable,
    month: int,
    year: int,
) -> list[CalendarDay]:
    """
    One cell per day of the month.

    The denominator is today's habit count for every day, not the count
    that existed on that day, so historical rates are approximate.
    """
    habits = list(habits)
    names = {h.id: h.name for h in habits}
    total = len(habits)

    completed_by_day: dict[date, list[str]] = defaultdict(list)
    for c in completions:
        if c.habit_id in names:
            completed_by_day[c.completed_date].append(names[c.habit_id])

    days = []
    for d in _month_days(month, year):
        done = completed_by_day.get(d, [])
        days.append(CalendarDay(
            day=d,
            completed_count=len(done),
            total_habit_count=total,
            rate_percent=_percent(len(done), total),
            completed_habit_names=sorted(done),
        ))
    return days


def statistics(
    habits: Iterable,
    completions: Iterable,
    today: date,
    grace_yesterday: bool = False,
) -> HabitStatistics:
    habits = list(habits)
    completions = list(completions)
    by_habit = _dates_by_habit(completions)
    known = {h.id for h in habits}

    active = [h for h in habits if enum_value(h.status) == HabitStatus.in_progress.value]
    done = [h for h in habits if enum_value(h.status) == HabitStatus.done.value]

    active_streaks = 0
    completed_today = 0
    for h in active:
        dates = by_habit.get(h.id, set())
        if compute_current_streak(dates, today, grace_yesterday) > 0:
            active_streaks += 1
        if is_completed_today(dates, today):
            completed_today += 1

    longest = LongestStreak(name=None, days=0)
    for h in habits:
        days = compute_longest_streak(by_habit.get(h.id, set()), today, grace_yesterday)
        if days > longest.days:
            longest = LongestStreak(name=h.name, days=days)

    return HabitStatistics(
        total_habits=len(habits),
        active_habits=len(active),
        completed_habits=len(done),
        total_completions=sum(1 for c in completions if c.habit_id in known),
        active_streaks_count=active_streaks,
        longest_streak=longest,
        completed_today=completed_today,
        completion_rate_today_percent=_percent(completed_today, len(active)),
    )


# ---------------------------------------------------------------------------
# Moods
# ---------------------------------------------------------------------------

def mood_trend(entries: Iterable, start: date, end: date) -> MoodTrend:
    points = [
        MoodPoint(day=e.entry_date, score=mood_score(e.mood))
        for e in _entries_in_range(entries, start, end)
    ]
    average = _average([p.score for p in points])
    return MoodTrend(points=points, average=average if average is not None else 0.0)


def mood_distribution(entries: Iterable, start: date, end: date) -> dict[str, int]:
    counts = {m.value: 0 for m in Mood}
    for e in _entries_in_range(entries, start, end):
        counts[enum_value(e.mood)] += 1
    return counts


def mood_calendar(entries: Iterable, month: int, year: int) -> list[MoodCalendarDay]:
    """Days with an entry only; missing days are left for the caller to render."""
    _, last = calendar.monthrange(year, month)
    first_day, last_day = date(year, month, 1), date(year, month, last)

    days = []
    for e in _entries_in_range(entries, first_day, last_day):
        mood = enum_value(e.mood)
        days.append(MoodCalendarDay(
            day=e.entry_date,
            mood=mood,
            emoji=getattr(e, "emoji", None) or MOOD_EMOJI[Mood(mood)],
            has_note=bool(e.note and e.note.strip()),
        ))
    return days


def correlation(
    entries: Iterable,
    completions: Iterable,
    start: date,
    end: date,
) -> MoodHabitCorrelation:
    """
    Compare the average mood on days with at least one habit completion
    against days with none. Only days that carry a mood entry count.
    """
    habit_days = {
        c.completed_date for c in completions if _in_range(c.completed_date, start, end)
    }

    with_habits: list[int] = []
    without_habits: list[int] = []
    for e in _entries_in_range(entries, start, end):
        bucket = with_habits if e.entry_date in habit_days else without_habits
        bucket.append(mood_score(e.mood))

    avg_with = _average(with_habits)
    avg_without = _average(without_habits)

    if avg_with is None or avg_without is None:
        insight = INSIGHT_NO_DATA
    elif avg_with > avg_without:
        insight = INSIGHT_POSITIVE
    elif avg_with < avg_without:
        insight = INSIGHT_NEGATIVE
    else:
        insight = INSIGHT_NEUTRAL

    return MoodHabitCorrelation(
        average_mood_on_habit_days=avg_with,
        average_mood_on_non_habit_days=avg_without,
        habit_days=len(with_habits),
        non_habit_days=len(without_habits),
        insight=insight,
    )


def default_range(today: date, days: int = 30) -> tuple[date, date]:
    """The `days`-day window ending on today."""
    return today - timedelta(days=days - 1), today
