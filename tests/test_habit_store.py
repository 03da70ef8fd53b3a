"""
Tests for HabitStore / MoodStore persistence and the completion flow
(db fixture, no HTTP).
"""
from __future__ import annotations

import pytest
from datetime import date, timedelta

from reclaim.core.config import settings
from reclaim.core.errors import (
    CompletionNotFoundError,
    DuplicateCompletionError,
    HabitNotFoundError,
    HabitOwnershipError,
)
from reclaim.models.habit import HabitStatus
from reclaim.models.habit_completion import HabitCompletion
from reclaim.services.habit_service import complete_habit, get_streak_snapshot, undo_completion
from reclaim.services.habit_store import HabitStore
from reclaim.services.mood_store import MoodStore
from reclaim.services.reward_policy import RewardPolicy


TODAY = date(2024, 1, 5)


@pytest.fixture()
def store(db):
    return HabitStore(db)


@pytest.fixture()
def habit(store, user_id):
    return store.create(user_id=user_id, name="Drink water", reminder_frequency="daily")


def _row_count(db, habit_id: str) -> int:
    return db.query(HabitCompletion).filter(HabitCompletion.habit_id == habit_id).count()


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------

class TestHabitCrud:
    def test_create_defaults(self, habit, user_id):
        assert habit.id
        assert habit.user_id == user_id
        assert habit.streak == 0
        assert habit.last_completed_date is None
        assert habit.status == HabitStatus.in_progress

    def test_get_owned(self, store, habit, user_id):
        assert store.get_owned(habit.id, user_id).id == habit.id

    def test_unknown_habit(self, store, user_id):
        with pytest.raises(HabitNotFoundError):
            store.get_owned("does-not-exist", user_id)

    def test_other_users_habit(self, store, habit):
        with pytest.raises(HabitOwnershipError):
            store.get_owned(habit.id, "someone-else")

    def test_list_excludes_done_by_default(self, store, habit, user_id):
        other = store.create(user_id=user_id, name="Stretch", reminder_frequency="weekly")
        store.update(other.id, user_id, {"status": HabitStatus.done})
        active_ids = [h.id for h in store.list_by_user(user_id)]
        all_ids = [h.id for h in store.list_by_user(user_id, include_done=True)]
        assert active_ids == [habit.id]
        assert set(all_ids) == {habit.id, other.id}

    def test_list_is_scoped_to_user(self, store, habit):
        assert store.list_by_user("nobody") == []

    def test_update_rejects_unknown_field(self, store, habit, user_id):
        with pytest.raises(ValueError):
            store.update(habit.id, user_id, {"user_id": "hijack"})

    def test_update_by_other_user_rejected(self, store, habit):
        with pytest.raises(HabitOwnershipError):
            store.update(habit.id, "someone-else", {"name": "x"})

    def test_delete_cascades_completions(self, db, store, habit, user_id):
        store.add_completion(habit.id, user_id, TODAY)
        store.add_completion(habit.id, user_id, TODAY - timedelta(days=1))
        store.delete(habit.id, user_id)
        assert store.get_by_id(habit.id) is None
        assert _row_count(db, habit.id) == 0


# ---------------------------------------------------------------------------
# Completions
# ---------------------------------------------------------------------------

class TestCompletions:
    def test_duplicate_is_rejected_and_stored_once(self, db, store, habit, user_id):
        store.add_completion(habit.id, user_id, TODAY)
        with pytest.raises(DuplicateCompletionError) as exc:
            store.add_completion(habit.id, user_id, TODAY)
        assert exc.value.details["date"] == "2024-01-05"
        assert _row_count(db, habit.id) == 1

    def test_unique_constraint_is_the_final_guard(self, db, store, habit, user_id, monkeypatch):
        """A request that slips past the pre-check still loses at the constraint."""
        store.add_completion(habit.id, user_id, TODAY)
        monkeypatch.setattr(store, "_completion_on", lambda habit_id, day: None)
        with pytest.raises(DuplicateCompletionError):
            store.add_completion(habit.id, user_id, TODAY)
        assert _row_count(db, habit.id) == 1
        # session still usable after the rollback
        store.add_completion(habit.id, user_id, TODAY - timedelta(days=1))
        assert _row_count(db, habit.id) == 2

    def test_completion_on_foreign_habit_rejected(self, store, habit):
        with pytest.raises(HabitOwnershipError):
            store.add_completion(habit.id, "someone-else", TODAY)

    def test_list_completions_newest_first(self, store, habit, user_id):
        for offset in (2, 0, 1):
            store.add_completion(habit.id, user_id, TODAY - timedelta(days=offset))
        assert store.completion_dates(habit.id) == [
            TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)
        ]

    def test_delete_completion(self, store, habit, user_id):
        store.add_completion(habit.id, user_id, TODAY)
        store.delete_completion(habit.id, user_id, TODAY)
        assert store.list_completions(habit.id) == []

    def test_delete_missing_completion(self, store, habit, user_id):
        with pytest.raises(CompletionNotFoundError):
            store.delete_completion(habit.id, user_id, TODAY)

    def test_list_user_completions_window(self, store, habit, user_id):
        for offset in range(5):
            store.add_completion(habit.id, user_id, TODAY - timedelta(days=offset))
        rows = store.list_user_completions(user_id, TODAY - timedelta(days=1), TODAY)
        assert [r.completed_date for r in rows] == [TODAY - timedelta(days=1), TODAY]


# ---------------------------------------------------------------------------
# Completion flow
# ---------------------------------------------------------------------------

class TestCompleteHabit:
    def test_five_consecutive_days(self, db, habit, user_id):
        policy = RewardPolicy(include_first_day=True)
        results = [
            complete_habit(db, habit.id, user_id, day=date(2024, 1, d), today=date(2024, 1, d), policy=policy)
            for d in range(1, 6)
        ]
        assert [r.snapshot.current_streak for r in results] == [1, 2, 3, 4, 5]
        assert results[0].milestone_reached == 1
        assert "first day" in results[0].message
        assert all(r.milestone_reached is None for r in results[1:])
        assert results[-1].habit.streak == 5
        assert results[-1].habit.last_completed_date == date(2024, 1, 5)

    def test_seventh_day_fires_milestone(self, db, habit, user_id):
        for d in range(1, 7):
            complete_habit(db, habit.id, user_id, day=date(2024, 1, d), today=date(2024, 1, d))
        result = complete_habit(db, habit.id, user_id, day=date(2024, 1, 7), today=date(2024, 1, 7))
        assert result.snapshot.current_streak == 7
        assert result.milestone_reached == 7
        assert "7 days straight" in result.message

    def test_backfill_outside_run_does_not_repeat_milestone(self, db, habit, user_id):
        today = date(2024, 1, 10)
        for offset in range(6, -1, -1):
            last = complete_habit(
                db, habit.id, user_id, day=today - timedelta(days=offset), today=today
            )
        assert last.milestone_reached == 7

        result = complete_habit(db, habit.id, user_id, day=today - timedelta(days=30), today=today)
        assert result.snapshot.current_streak == 7
        assert result.milestone_reached is None
        assert result.message is None

    def test_future_day_does_not_repeat_milestone(self, db, habit, user_id):
        first = complete_habit(db, habit.id, user_id, day=TODAY, today=TODAY)
        assert first.milestone_reached == 1
        result = complete_habit(db, habit.id, user_id, day=TODAY + timedelta(days=3), today=TODAY)
        assert result.snapshot.current_streak == 1
        assert result.milestone_reached is None

    def test_backfill_that_extends_run_can_reach_milestone(self, db, habit, user_id):
        today = date(2024, 1, 10)
        for offset in (0, 1, 2, 4, 5, 6):
            complete_habit(db, habit.id, user_id, day=today - timedelta(days=offset), today=today)
        result = complete_habit(db, habit.id, user_id, day=today - timedelta(days=3), today=today)
        assert result.snapshot.current_streak == 7
        assert result.milestone_reached == 7

    def test_streak_is_recomputed_not_incremented(self, db, store, habit, user_id):
        store.update(habit.id, user_id, {"streak": 99})
        result = complete_habit(db, habit.id, user_id, day=TODAY, today=TODAY)
        assert result.snapshot.current_streak == 1
        assert result.habit.streak == 1

    def test_backfilling_a_gap_joins_runs(self, db, habit, user_id):
        for d in (1, 2, 4, 5):
            complete_habit(db, habit.id, user_id, day=date(2024, 1, d), today=TODAY)
        result = complete_habit(db, habit.id, user_id, day=date(2024, 1, 3), today=TODAY)
        assert result.snapshot.current_streak == 5
        assert result.snapshot.longest_streak == 5

    def test_duplicate_leaves_cache_untouched(self, db, habit, user_id):
        complete_habit(db, habit.id, user_id, day=TODAY, today=TODAY)
        with pytest.raises(DuplicateCompletionError):
            complete_habit(db, habit.id, user_id, day=TODAY, today=TODAY)
        db.refresh(habit)
        assert habit.streak == 1

    def test_undo_refreshes_cache(self, db, habit, user_id):
        for offset in range(3):
            complete_habit(db, habit.id, user_id, day=TODAY - timedelta(days=offset), today=TODAY)
        snap = undo_completion(db, habit.id, user_id, TODAY - timedelta(days=1), today=TODAY)
        assert snap.current_streak == 1
        assert snap.total_completions == 2
        db.refresh(habit)
        assert habit.streak == 1
        assert habit.last_completed_date == TODAY

    def test_pending_today_breaks_streak_by_default(self, db, habit, user_id):
        yesterday = TODAY - timedelta(days=1)
        complete_habit(db, habit.id, user_id, day=yesterday, today=yesterday)
        assert get_streak_snapshot(db, habit.id, user_id, TODAY).current_streak == 0

    def test_grace_setting_keeps_yesterdays_run(self, db, habit, user_id, monkeypatch):
        monkeypatch.setattr(settings, "STREAK_GRACE_YESTERDAY", True)
        yesterday = TODAY - timedelta(days=1)
        complete_habit(db, habit.id, user_id, day=yesterday, today=yesterday)
        assert get_streak_snapshot(db, habit.id, user_id, TODAY).current_streak == 1


# ---------------------------------------------------------------------------
# Moods
# ---------------------------------------------------------------------------

class TestMoodStore:
    def test_save_overwrites_same_day(self, db, user_id):
        moods = MoodStore(db)
        moods.save(user_id, TODAY, "bad", note="tired")
        entry = moods.save(user_id, TODAY, "great", note=None)
        assert entry.emoji == "😊"
        rows = moods.list_by_user(user_id)
        assert len(rows) == 1
        assert rows[0].note is None

    def test_invalid_mood(self, db, user_id):
        with pytest.raises(ValueError):
            MoodStore(db).save(user_id, TODAY, "ecstatic")

    def test_list_window(self, db, user_id):
        moods = MoodStore(db)
        for offset, mood in enumerate(["good", "okay", "bad"]):
            moods.save(user_id, TODAY - timedelta(days=offset), mood)
        rows = moods.list_by_user(user_id, TODAY - timedelta(days=1), TODAY)
        assert [r.entry_date for r in rows] == [TODAY - timedelta(days=1), TODAY]
