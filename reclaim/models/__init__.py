from .habit import Habit, HabitStatus
from .habit_completion import HabitCompletion
from .mood_entry import MoodEntry, Mood, MOOD_EMOJI


def enum_value(v) -> str:
    """Bare string value of a str-enum member or plain str."""
    return v.value if hasattr(v, "value") else str(v)


__all__ = [
    "Habit",
    "HabitStatus",
    "HabitCompletion",
    "MoodEntry",
    "Mood",
    "MOOD_EMOJI",
    "enum_value",
]
