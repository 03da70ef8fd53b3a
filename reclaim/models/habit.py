from datetime import datetime, date
import enum
import uuid

from sqlalchemy import Integer, String, Text, DateTime, Date, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from reclaim.db.base import Base


class HabitStatus(str, enum.Enum):
    in_progress = "in_progress"
    done = "done"


class Habit(Base):
    """
    A habit owned by one user.

    `streak` and `last_completed_date` are a cache of the completion set;
    they are recomputed on every completion, never incremented.
    """

    __tablename__ = "habits"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    reminder_frequency: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(HabitStatus, name="habit_status_enum"),
        nullable=False,
        default=HabitStatus.in_progress,
    )
    streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
