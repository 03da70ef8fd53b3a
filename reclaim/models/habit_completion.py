"""
HabitCompletion — one row per (habit, calendar day).

Never updated; deleted on undo or together with its habit.
The unique constraint is the authoritative guard against double counting.
"""
import uuid
from datetime import date

from sqlalchemy import String, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from reclaim.db.base import Base


class HabitCompletion(Base):
    __tablename__ = "habit_completions"
    __table_args__ = (
        UniqueConstraint("habit_id", "completed_date", name="uq_habit_completion_day"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    habit_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("habits.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    completed_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
