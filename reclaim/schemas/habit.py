"""
Habit request / response schemas.

POST   /habits                     → HabitCreateRequest → HabitResponse
PATCH  /habits/{id}                → HabitUpdateRequest → HabitResponse
POST   /habits/{id}/complete       → CompleteRequest    → CompletionResponse
GET    /habits/{id}/streak         → StreakResponse
GET    /habits/streaks             → StreakBoardResponse
"""
from __future__ import annotations

import enum
from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reclaim.models.habit import HabitStatus


class ReminderFrequency(str, enum.Enum):
    """Display label only; nothing schedules reminders from it."""
    daily = "daily"
    weekdays = "weekdays"
    weekly = "weekly"
    custom = "custom"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class HabitCreateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Annotated[str, Field(
        min_length=1,
        max_length=200,
        description="Habit name. Stripped of leading/trailing whitespace.",
        examples=["Drink water", "Read 20 pages"],
    )]
    description: Optional[str] = Field(default=None, max_length=2000)
    reminder_frequency: ReminderFrequency = Field(
        default=ReminderFrequency.daily,
        examples=["daily", "weekly"],
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("name must not be empty after stripping whitespace")
        return stripped


class HabitUpdateRequest(BaseModel):
    """Partial update; omitted fields are left untouched."""
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    reminder_frequency: Optional[ReminderFrequency] = None
    status: Optional[HabitStatus] = Field(
        default=None, description='"in_progress" | "done"'
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("name must not be empty after stripping whitespace")
        return v


class CompleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: Optional[date] = Field(
        default=None,
        alias="date",
        description="Day the habit was done. Defaults to today (UTC).",
        examples=["2026-02-20"],
    )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class StreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    total_completions: int


class HabitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    reminder_frequency: str
    status: str
    streak: int = Field(description="Cached current streak (recomputed on completion).")
    last_completed_date: Optional[str] = None
    created_at: str


class HabitDetailResponse(HabitResponse):
    snapshot: StreakResponse


class HabitListResponse(BaseModel):
    total: int
    items: list[HabitResponse]


class CompletionOut(BaseModel):
    id: str
    habit_id: str
    completed_date: str


class CompletionListResponse(BaseModel):
    habit_id: str
    total: int
    items: list[CompletionOut] = Field(description="Newest first.")


class CompletionResponse(BaseModel):
    habit_id: str
    completed_date: str
    streak: int = Field(description="Current streak after this completion.")
    longest_streak: int
    total_completions: int
    milestone_reached: Optional[int] = Field(
        default=None, description="Set only when this completion hit a milestone exactly."
    )
    message: Optional[str] = None


class GraphDayOut(BaseModel):
    date: str
    completed: bool
    is_today: bool
    day_name: str


class StreakCardResponse(BaseModel):
    habit_id: str
    name: str
    current_streak: int
    longest_streak: int
    total_completions: int
    completed_today: bool
    earned_badges: list[int]
    next_milestone: Optional[int] = None
    contribution_graph: list[list[GraphDayOut]] = Field(
        description="Rows of 7 days, oldest first, ending today."
    )


class StreakBoardResponse(BaseModel):
    today: str
    items: list[StreakCardResponse]
