"""
HabitStore — persistence for habits and their per-day completions.

Every mutating call is scoped by the owning user id. Ownership failures
(HabitOwnershipError, 403) are reported separately from missing rows
(HabitNotFoundError, 404).

Duplicate completions
---------------------
`add_completion` checks for an existing (habit, date) row first, then
relies on the `uq_habit_completion_day` unique constraint as the final
guard: a concurrent insert that loses the race surfaces as an
IntegrityError, which is rolled back and reported as
DuplicateCompletionError. Exactly one row survives either way.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reclaim.core.errors import (
    CompletionNotFoundError,
    DuplicateCompletionError,
    HabitNotFoundError,
    HabitOwnershipError,
)
from reclaim.models.habit import Habit, HabitStatus
from reclaim.models.habit_completion import HabitCompletion

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({
    "name",
    "description",
    "reminder_frequency",
    "status",
    "streak",
    "last_completed_date",
})


class HabitStore:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Habits
    # ------------------------------------------------------------------

    def create(
        self,
        user_id: str,
        name: str,
        reminder_frequency: str,
        description: Optional[str] = None,
    ) -> Habit:
        habit = Habit(
            user_id=user_id,
            name=name,
            description=description,
            reminder_frequency=reminder_frequency,
            status=HabitStatus.in_progress,
            streak=0,
            last_completed_date=None,
        )
        self.db.add(habit)
        self.db.commit()
        self.db.refresh(habit)
        logger.info("Habit created: %s user=%s", habit.id, user_id)
        return habit

    def list_by_user(self, user_id: str, include_done: bool = False) -> list[Habit]:
        q = self.db.query(Habit).filter(Habit.user_id == user_id)
        if not include_done:
            q = q.filter(Habit.status != HabitStatus.done)
        return q.order_by(Habit.created_at.desc(), Habit.name).all()

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        return self.db.get(Habit, habit_id)

    def get_owned(self, habit_id: str, user_id: str) -> Habit:
        habit = self.get_by_id(habit_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        if habit.user_id != user_id:
            raise HabitOwnershipError(habit_id)
        return habit

    def update(self, habit_id: str, user_id: str, fields: dict[str, Any]) -> Habit:
        habit = self.get_owned(habit_id, user_id)
        for key, value in fields.items():
            if key not in _UPDATABLE_FIELDS:
                raise ValueError(f"field {key!r} cannot be updated")
            setattr(habit, key, value)
        self.db.commit()
        self.db.refresh(habit)
        return habit

    def delete(self, habit_id: str, user_id: str) -> None:
        """Delete a habit and every completion recorded for it."""
        habit = self.get_owned(habit_id, user_id)
        removed = (
            self.db.query(HabitCompletion)
            .filter(HabitCompletion.habit_id == habit.id)
            .delete(synchronize_session=False)
        )
        self.db.delete(habit)
        self.db.commit()
        logger.info("Habit deleted: %s user=%s completions=%d", habit_id, user_id, removed)

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------

    def _completion_on(self, habit_id: str, day: date) -> Optional[HabitCompletion]:
        return (
            self.db.query(HabitCompletion)
            .filter(
                HabitCompletion.habit_id == habit_id,
                HabitCompletion.completed_date == day,
            )
            .first()
        )

    def add_completion(self, habit_id: str, user_id: str, day: date) -> HabitCompletion:
        """
        Record that the habit was done on `day`.
        Raises DuplicateCompletionError if that day is already recorded.
        """
        habit = self.get_owned(habit_id, user_id)
        if self._completion_on(habit.id, day) is not None:
            logger.info("Duplicate completion rejected: habit=%s date=%s", habit_id, day)
            raise DuplicateCompletionError(habit_id, day)

        completion = HabitCompletion(habit_id=habit.id, user_id=user_id, completed_date=day)
        self.db.add(completion)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost the race to a concurrent request for the same day
            self.db.rollback()
            logger.info("Duplicate completion rejected by constraint: habit=%s date=%s", habit_id, day)
            raise DuplicateCompletionError(habit_id, day)

        self.db.refresh(completion)
        logger.info("Habit completion added: habit=%s date=%s", habit_id, day)
        return completion

    def delete_completion(self, habit_id: str, user_id: str, day: date) -> None:
        habit = self.get_owned(habit_id, user_id)
        completion = self._completion_on(habit.id, day)
        if completion is None:
            raise CompletionNotFoundError(habit_id, day)
        self.db.delete(completion)
        self.db.commit()
        logger.info("Habit completion deleted: habit=%s date=%s", habit_id, day)

    def list_completions(self, habit_id: str) -> list[HabitCompletion]:
        """Newest first."""
        return (
            self.db.query(HabitCompletion)
            .filter(HabitCompletion.habit_id == habit_id)
            .order_by(HabitCompletion.completed_date.desc())
            .all()
        )

    def completion_dates(self, habit_id: str) -> list[date]:
        return [c.completed_date for c in self.list_completions(habit_id)]

    def list_user_completions(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[HabitCompletion]:
        q = self.db.query(HabitCompletion).filter(HabitCompletion.user_id == user_id)
        if start is not None:
            q = q.filter(HabitCompletion.completed_date >= start)
        if end is not None:
            q = q.filter(HabitCompletion.completed_date <= end)
        return q.order_by(HabitCompletion.completed_date).all()
