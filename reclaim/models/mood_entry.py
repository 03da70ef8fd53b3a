from datetime import datetime, date
import enum
import uuid

from sqlalchemy import String, Text, DateTime, Date, Enum, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from reclaim.db.base import Base


class Mood(str, enum.Enum):
    great = "great"
    good = "good"
    okay = "okay"
    bad = "bad"
    terrible = "terrible"


MOOD_EMOJI = {
    Mood.great: "😊",
    Mood.good: "🙂",
    Mood.okay: "😐",
    Mood.bad: "😟",
    Mood.terrible: "😢",
}


class MoodEntry(Base):
    """At most one entry per (user, date); later saves overwrite."""

    __tablename__ = "mood_entries"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_mood_user_date"),)

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    entry_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    mood: Mapped[str] = mapped_column(
        Enum(Mood, name="mood_enum"), nullable=False
    )
    emoji: Mapped[str] = mapped_column(String(16), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
