"""
MoodStore — one mood entry per (user, date); saving again overwrites.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from reclaim.models.mood_entry import Mood, MoodEntry, MOOD_EMOJI

logger = logging.getLogger(__name__)


class MoodStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str, day: date) -> Optional[MoodEntry]:
        return (
            self.db.query(MoodEntry)
            .filter(MoodEntry.user_id == user_id, MoodEntry.entry_date == day)
            .first()
        )

    def save(
        self,
        user_id: str,
        day: date,
        mood: Mood | str,
        note: Optional[str] = None,
    ) -> MoodEntry:
        mood = Mood(mood)
        entry = self.get(user_id, day)
        if entry is None:
            entry = MoodEntry(user_id=user_id, entry_date=day)
            self.db.add(entry)
        entry.mood = mood
        entry.emoji = MOOD_EMOJI[mood]
        entry.note = note
        self.db.commit()
        self.db.refresh(entry)
        logger.info("Mood saved: user=%s date=%s mood=%s", user_id, day, mood.value)
        return entry

    def list_by_user(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[MoodEntry]:
        q = self.db.query(MoodEntry).filter(MoodEntry.user_id == user_id)
        if start is not None:
            q = q.filter(MoodEntry.entry_date >= start)
        if end is not None:
            q = q.filter(MoodEntry.entry_date <= end)
        return q.order_by(MoodEntry.entry_date).all()
