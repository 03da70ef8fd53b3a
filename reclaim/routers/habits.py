"""
Habits router.

POST   /habits                          — create
GET    /habits                          — list (active, or all with include_done)
GET    /habits/streaks                  — streak board for active habits
GET    /habits/{id}                     — single habit + live streak snapshot
PATCH  /habits/{id}                     — partial update
DELETE /habits/{id}                     — delete habit and its completions
POST   /habits/{id}/complete            — mark done for a day
DELETE /habits/{id}/complete/{date}     — undo a completion
GET    /habits/{id}/completions         — completion history, newest first
GET    /habits/{id}/streak              — live streak snapshot
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from reclaim.core.config import settings
from reclaim.core.deps import get_current_user_id
from reclaim.db.base import get_db
from reclaim.models import Habit, enum_value
from reclaim.schemas.common import error_responses
from reclaim.schemas.habit import (
    CompleteRequest,
    CompletionListResponse,
    CompletionOut,
    CompletionResponse,
    GraphDayOut,
    HabitCreateRequest,
    HabitDetailResponse,
    HabitListResponse,
    HabitResponse,
    HabitUpdateRequest,
    StreakBoardResponse,
    StreakCardResponse,
    StreakResponse,
)
from reclaim.services.habit_service import (
    complete_habit,
    get_streak_snapshot,
    is_completed_today,
    today_utc,
    undo_completion,
)
from reclaim.services.habit_store import HabitStore
from reclaim.services.reward_policy import default_policy
from reclaim.services.streak_engine import (
    StreakSnapshot,
    build_snapshot,
    contribution_graph,
)

router = APIRouter(
    prefix="/habits",
    tags=["habits"],
    responses=error_responses(401, 422),
)


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _habit_to_response(h: Habit) -> HabitResponse:
    return HabitResponse(
        id=h.id,
        name=h.name,
        description=h.description,
        reminder_frequency=h.reminder_frequency,
        status=enum_value(h.status),
        streak=h.streak,
        last_completed_date=str(h.last_completed_date) if h.last_completed_date else None,
        created_at=h.created_at.isoformat() if h.created_at else "",
    )


def _snapshot_to_response(s: StreakSnapshot) -> StreakResponse:
    return StreakResponse(
        current_streak=s.current_streak,
        longest_streak=s.longest_streak,
        total_completions=s.total_completions,
    )


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=HabitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a habit",
)
def create_habit(
    payload: HabitCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    habit = HabitStore(db).create(
        user_id=user_id,
        name=payload.name,
        description=payload.description,
        reminder_frequency=payload.reminder_frequency,
    )
    return _habit_to_response(habit)


@router.get("", response_model=HabitListResponse, summary="List the user's habits")
def list_habits(
    include_done: bool = Query(default=False, description="Include habits marked done."),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    habits = HabitStore(db).list_by_user(user_id, include_done=include_done)
    return HabitListResponse(
        total=len(habits),
        items=[_habit_to_response(h) for h in habits],
    )


@router.get(
    "/streaks",
    response_model=StreakBoardResponse,
    summary="Streaks, badges and activity graph per active habit",
)
def streak_board(
    today: Optional[date] = Query(
        default=None,
        description="Evaluation date for streaks. Defaults to today (UTC).",
        examples=["2026-02-21"],
    ),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    One card per active habit that has at least one completion,
    highest current streak first.
    """
    today = today or today_utc()
    store = HabitStore(db)
    policy = default_policy()

    cards = []
    for habit in store.list_by_user(user_id):
        dates = store.completion_dates(habit.id)
        if not dates:
            continue
        snap = build_snapshot(dates, today, settings.STREAK_GRACE_YESTERDAY)
        grid = contribution_graph(dates, today, settings.CONTRIBUTION_GRAPH_WEEKS)
        cards.append(StreakCardResponse(
            habit_id=habit.id,
            name=habit.name,
            current_streak=snap.current_streak,
            longest_streak=snap.longest_streak,
            total_completions=snap.total_completions,
            completed_today=is_completed_today(dates, today),
            earned_badges=policy.earned_badges(snap.current_streak),
            next_milestone=policy.next_milestone(snap.current_streak),
            contribution_graph=[
                [
                    GraphDayOut(
                        date=str(cell.day),
                        completed=cell.completed,
                        is_today=cell.is_today,
                        day_name=cell.day_name,
                    )
                    for cell in row
                ]
                for row in grid
            ],
        ))

    cards.sort(key=lambda c: c.current_streak, reverse=True)
    return StreakBoardResponse(today=str(today), items=cards)


# ---------------------------------------------------------------------------
# Single habit
# ---------------------------------------------------------------------------

@router.get(
    "/{habit_id}",
    response_model=HabitDetailResponse,
    summary="Get a habit with its live streak",
    responses=error_responses(403, 404),
)
def get_habit(
    habit_id: str,
    today: Optional[date] = Query(
        default=None,
        description="Evaluation date for streaks. Defaults to today (UTC).",
        examples=["2026-02-21"],
    ),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    habit = HabitStore(db).get_owned(habit_id, user_id)
    snap = get_streak_snapshot(db, habit_id, user_id, today or today_utc())
    return HabitDetailResponse(
        **_habit_to_response(habit).model_dump(),
        snapshot=_snapshot_to_response(snap),
    )


@router.patch(
    "/{habit_id}",
    response_model=HabitResponse,
    summary="Update name, description, frequency or status",
)
def update_habit(
    habit_id: str,
    payload: HabitUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    fields = {
        k: v for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k == "description"
    }
    habit = HabitStore(db).update(habit_id, user_id, fields)
    return _habit_to_response(habit)


@router.delete(
    "/{habit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a habit and all of its completions",
)
def delete_habit(
    habit_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    HabitStore(db).delete(habit_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Completions
# ---------------------------------------------------------------------------

@router.post(
    "/{habit_id}/complete",
    response_model=CompletionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Mark a habit complete for a day",
    responses={
        201: {"description": "Completion stored; fresh streak returned."},
        **error_responses(403, 404, 409),
    },
)
def complete(
    habit_id: str,
    payload: Optional[CompleteRequest] = None,
    today: Optional[date] = Query(
        default=None,
        description="Evaluation date for streaks. Defaults to today (UTC).",
        examples=["2026-02-21"],
    ),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Store the completion, recompute the streak from history and report a
    milestone when the new streak equals one exactly.

    Raises **409** `DUPLICATE_COMPLETION` if the day was already recorded;
    clients may treat it as a no-op.
    """
    day = payload.day if payload else None
    result = complete_habit(db, habit_id, user_id, day=day, today=today)
    return CompletionResponse(
        habit_id=result.habit.id,
        completed_date=str(result.completed_date),
        streak=result.snapshot.current_streak,
        longest_streak=result.snapshot.longest_streak,
        total_completions=result.snapshot.total_completions,
        milestone_reached=result.milestone_reached,
        message=result.message,
    )


@router.delete(
    "/{habit_id}/complete/{day}",
    response_model=StreakResponse,
    summary="Undo a completion",
    responses=error_responses(403, 404),
)
def undo_complete(
    habit_id: str,
    day: date,
    today: Optional[date] = Query(
        default=None,
        description="Evaluation date for streaks. Defaults to today (UTC).",
        examples=["2026-02-21"],
    ),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    snap = undo_completion(db, habit_id, user_id, day, today=today)
    return _snapshot_to_response(snap)


@router.get(
    "/{habit_id}/completions",
    response_model=CompletionListResponse,
    summary="Completion history, newest first",
)
def list_completions(
    habit_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    store = HabitStore(db)
    habit = store.get_owned(habit_id, user_id)
    items = store.list_completions(habit.id)
    return CompletionListResponse(
        habit_id=habit.id,
        total=len(items),
        items=[
            CompletionOut(id=c.id, habit_id=c.habit_id, completed_date=str(c.completed_date))
            for c in items
        ],
    )


@router.get(
    "/{habit_id}/streak",
    response_model=StreakResponse,
    summary="Live streak computed from the completion history",
)
def habit_streak(
    habit_id: str,
    today: Optional[date] = Query(
        default=None,
        description="Evaluation date for streaks. Defaults to today (UTC).",
        examples=["2026-02-21"],
    ),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    snap = get_streak_snapshot(db, habit_id, user_id, today or today_utc())
    return _snapshot_to_response(snap)
