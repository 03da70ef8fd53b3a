"""
Mood schemas.

PUT /moods/{date}  → MoodSaveRequest → MoodEntryResponse
GET /moods         → MoodListResponse
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from reclaim.models.mood_entry import Mood


class MoodSaveRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    mood: Mood = Field(description='"great" | "good" | "okay" | "bad" | "terrible"')
    note: Optional[str] = Field(default=None, max_length=5000)


class MoodEntryResponse(BaseModel):
    date: str
    mood: str
    emoji: str
    note: Optional[str] = None


class MoodListResponse(BaseModel):
    total: int
    items: list[MoodEntryResponse]
