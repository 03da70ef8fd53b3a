"""
Streak Engine — consecutive-day streaks derived from a habit's completion set.

Definitions
-----------
Current streak:
  Walk backwards one calendar day at a time starting at `today` and count
  consecutive days present in the completion set. Completions dated after
  `today` are ignored.

  An uncompleted `today` yields 0. With `grace_yesterday=True` the walk
  starts at yesterday instead, so the run stays "alive" until the day
  is over.

Longest streak:
  The longest maximal run of consecutive days anywhere in history
  (single sorted scan), never less than the current streak.

Pure functions over `datetime.date` values — no ORM, no clock.
`today` is always passed in explicitly.

Public API
----------
compute_current_streak(dates, today, grace_yesterday) -> int
compute_longest_streak(dates, today)                  -> int
build_snapshot(dates, today, grace_yesterday)         -> StreakSnapshot
is_completed_today(dates, today)                      -> bool
contribution_graph(dates, today, weeks)               -> list[list[GraphDay]]
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional


_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StreakSnapshot:
    """Derived on read, never persisted."""
    current_streak: int
    longest_streak: int
    total_completions: int


@dataclass(frozen=True)
class GraphDay:
    day: date
    completed: bool
    is_today: bool
    day_name: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _date_set(dates: Iterable[date], today: Optional[date] = None) -> set[date]:
    """Deduplicate and drop anything after `today`."""
    if today is None:
        return set(dates)
    return {d for d in dates if d <= today}


def _count_back(date_set: set[date], start: date) -> int:
    streak = 0
    cursor = start
    while cursor in date_set:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def compute_current_streak(
    dates: Iterable[date],
    today: date,
    grace_yesterday: bool = False,
) -> int:
    """Consecutive completed days ending today (or yesterday, with grace)."""
    date_set = _date_set(dates, today)
    if today in date_set:
        return _count_back(date_set, today)
    if grace_yesterday:
        return _count_back(date_set, today - timedelta(days=1))
    return 0


def compute_longest_streak(
    dates: Iterable[date],
    today: Optional[date] = None,
    grace_yesterday: bool = False,
) -> int:
    """
    Length of the longest run of consecutive days.

    Equivalent to anchoring compute_current_streak at every completion date
    and taking the maximum, in O(n log n).
    """
    date_set = _date_set(dates, today)
    longest = 0
    run = 0
    previous: Optional[date] = None
    for d in sorted(date_set):
        if previous is not None and d - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = d

    if today is not None:
        longest = max(longest, compute_current_streak(date_set, today, grace_yesterday))
    return longest


def build_snapshot(
    dates: Iterable[date],
    today: date,
    grace_yesterday: bool = False,
) -> StreakSnapshot:
    date_set = set(dates)
    return StreakSnapshot(
        current_streak=compute_current_streak(date_set, today, grace_yesterday),
        longest_streak=compute_longest_streak(date_set, today, grace_yesterday),
        total_completions=len(date_set),
    )


def is_completed_today(dates: Iterable[date], today: date) -> bool:
    return today in set(dates)


def contribution_graph(
    dates: Iterable[date],
    today: date,
    weeks: int = 12,
) -> list[list[GraphDay]]:
    """
    Activity grid of `weeks * 7` days ending on today, oldest first,
    chunked into rows of 7.
    """
    date_set = set(dates)
    total = max(weeks, 0) * 7
    start = today - timedelta(days=total - 1)

    grid: list[list[GraphDay]] = []
    row: list[GraphDay] = []
    for i in range(total):
        d = start + timedelta(days=i)
        row.append(GraphDay(
            day=d,
            completed=d in date_set,
            is_today=d == today,
            day_name=_DAY_NAMES[d.weekday()],
        ))
        if len(row) == 7:
            grid.append(row)
            row = []
    return grid
