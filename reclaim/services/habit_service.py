"""
Habit service — the "mark complete" flow.

  1. HabitStore records the completion (rejects duplicates).
  2. The streak is recomputed from the full completion set.
  3. The habit's cached `streak` / `last_completed_date` are refreshed.
  4. RewardPolicy decides whether a milestone message fires; only a
     completion that moved the current streak can fire one.

The cache is never incremented in place, so it cannot drift from the
completion rows. Undo goes through the same refresh.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from reclaim.core.config import settings
from reclaim.models.habit import Habit
from reclaim.services.habit_store import HabitStore
from reclaim.services.reward_policy import RewardPolicy, default_policy
from reclaim.services.streak_engine import (  # noqa: F401
    StreakSnapshot,
    build_snapshot,
    is_completed_today,
)

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    habit: Habit
    completed_date: date
    snapshot: StreakSnapshot
    milestone_reached: Optional[int]
    message: Optional[str]


def today_utc() -> date:
    return datetime.now(tz=timezone.utc).date()


def refresh_streak_cache(
    store: HabitStore,
    habit: Habit,
    today: date,
    grace_yesterday: Optional[bool] = None,
) -> StreakSnapshot:
    """Recompute the snapshot and write the cached fields back to the habit."""
    if grace_yesterday is None:
        grace_yesterday = settings.STREAK_GRACE_YESTERDAY
    dates = store.completion_dates(habit.id)
    snapshot = build_snapshot(dates, today, grace_yesterday)
    past = [d for d in dates if d <= today]

    habit.streak = snapshot.current_streak
    habit.last_completed_date = max(past) if past else None
    store.db.commit()
    store.db.refresh(habit)
    return snapshot


def get_streak_snapshot(
    db: Session,
    habit_id: str,
    user_id: str,
    today: date,
) -> StreakSnapshot:
    store = HabitStore(db)
    habit = store.get_owned(habit_id, user_id)
    return build_snapshot(
        store.completion_dates(habit.id), today, settings.STREAK_GRACE_YESTERDAY
    )


def complete_habit(
    db: Session,
    habit_id: str,
    user_id: str,
    day: Optional[date] = None,
    today: Optional[date] = None,
    policy: Optional[RewardPolicy] = None,
) -> CompletionResult:
    """
    Mark a habit done for `day` (defaults to today) and return the fresh streak.
    Raises DuplicateCompletionError when the day is already recorded.
    """
    today = today or today_utc()
    day = day or today
    policy = policy or default_policy()
    store = HabitStore(db)

    previous = get_streak_snapshot(db, habit_id, user_id, today)
    store.add_completion(habit_id, user_id, day)
    habit = store.get_owned(habit_id, user_id)
    snapshot = refresh_streak_cache(store, habit, today)

    # Backfills outside the current run and future days leave the streak
    # unchanged and must not announce a milestone again.
    milestone: Optional[int] = None
    message: Optional[str] = None
    streak_moved = snapshot.current_streak != previous.current_streak
    if streak_moved and policy.should_notify(snapshot.current_streak):
        milestone = snapshot.current_streak
        message = policy.milestone_message(habit.name, milestone)
        logger.info("Milestone reached: habit=%s streak=%d", habit.id, milestone)

    return CompletionResult(
        habit=habit,
        completed_date=day,
        snapshot=snapshot,
        milestone_reached=milestone,
        message=message,
    )


def undo_completion(
    db: Session,
    habit_id: str,
    user_id: str,
    day: date,
    today: Optional[date] = None,
) -> StreakSnapshot:
    store = HabitStore(db)
    store.delete_completion(habit_id, user_id, day)
    habit = store.get_owned(habit_id, user_id)
    return refresh_streak_cache(store, habit, today or today_utc())
