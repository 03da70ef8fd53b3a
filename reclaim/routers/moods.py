"""
Moods router — the minimal write surface the analytics views read from.

PUT /moods/{date}   — save (overwrite) the mood for a day
GET /moods          — list entries in a date window
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from reclaim.core.deps import get_current_user_id
from reclaim.db.base import get_db
from reclaim.models import MoodEntry, enum_value
from reclaim.schemas.common import error_responses
from reclaim.schemas.mood import MoodEntryResponse, MoodListResponse, MoodSaveRequest
from reclaim.services.mood_store import MoodStore

router = APIRouter(
    prefix="/moods",
    tags=["moods"],
    responses=error_responses(401, 422),
)


def _entry_to_response(e: MoodEntry) -> MoodEntryResponse:
    return MoodEntryResponse(
        date=str(e.entry_date),
        mood=enum_value(e.mood),
        emoji=e.emoji,
        note=e.note,
    )


@router.put(
    "/{day}",
    response_model=MoodEntryResponse,
    summary="Save the mood for a day (later saves overwrite)",
)
def save_mood(
    day: date,
    payload: MoodSaveRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    entry = MoodStore(db).save(user_id, day, payload.mood, payload.note)
    return _entry_to_response(entry)


@router.get("", response_model=MoodListResponse, summary="List mood entries, oldest first")
def list_moods(
    start_date: Optional[date] = Query(default=None, examples=["2026-02-01"]),
    end_date: Optional[date] = Query(default=None, examples=["2026-02-28"]),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    entries = MoodStore(db).list_by_user(user_id, start_date, end_date)
    return MoodListResponse(
        total=len(entries),
        items=[_entry_to_response(e) for e in entries],
    )
