"""
Analytics response schemas.

All dates are ISO strings (YYYY-MM-DD); percentages are 0–100.
"""
from typing import Optional
from pydantic import BaseModel, Field


class HabitRateResponse(BaseModel):
    habit_id: str
    name: str
    completed_count: int
    total_days: int = Field(description="Inclusive day count of the window.")
    rate_percent: float = Field(examples=[42.9])


class CompletionRatesResponse(BaseModel):
    start_date: str
    end_date: str
    rates: list[HabitRateResponse]


class CalendarDayResponse(BaseModel):
    date: str
    completed_count: int
    total_habit_count: int = Field(
        description="Current habit count, used as the denominator for every day."
    )
    rate_percent: float
    completed_habit_names: list[str]


class HabitCalendarResponse(BaseModel):
    month: int
    year: int
    days: list[CalendarDayResponse]


class LongestStreakResponse(BaseModel):
    name: Optional[str] = None
    days: int


class HabitStatisticsResponse(BaseModel):
    total_habits: int
    active_habits: int
    completed_habits: int
    total_completions: int
    active_streaks_count: int
    longest_streak: LongestStreakResponse
    completed_today: int
    completion_rate_today_percent: float


class MoodPointResponse(BaseModel):
    date: str
    score: int = Field(description="1 (terrible) – 5 (great).")


class MoodTrendResponse(BaseModel):
    start_date: str
    end_date: str
    points: list[MoodPointResponse]
    average: float = Field(description="Rounded to 2 decimals; 0 with no entries.")


class MoodDistributionResponse(BaseModel):
    great: int
    good: int
    okay: int
    bad: int
    terrible: int


class MoodCalendarDayResponse(BaseModel):
    date: str
    mood: str
    emoji: str
    has_note: bool


class MoodCalendarResponse(BaseModel):
    month: int
    year: int
    days: list[MoodCalendarDayResponse] = Field(
        description="Only days with an entry."
    )


class CorrelationResponse(BaseModel):
    start_date: str
    end_date: str
    average_mood_on_habit_days: Optional[float] = None
    average_mood_on_non_habit_days: Optional[float] = None
    habit_days: int
    non_habit_days: int
    insight: str
