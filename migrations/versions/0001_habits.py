"""habits and habit completions

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

Completions cascade with their habit. UNIQUE(habit_id, completed_date)
is the guard against recording the same day twice.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    habit_status_enum = sa.Enum("in_progress", "done", name="habit_status_enum")
    habit_status_enum.create(op.get_bind(), checkfirst=True)

    # --- habits ---
    op.create_table(
        "habits",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("reminder_frequency", sa.String(32), nullable=False),
        sa.Column("status", sa.Enum(
            "in_progress", "done", name="habit_status_enum", create_type=False,
        ), nullable=False, server_default="in_progress"),
        sa.Column("streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_completed_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_habits_user_id", "habits", ["user_id"])

    # --- habit_completions ---
    op.create_table(
        "habit_completions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("habit_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("completed_date", sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["habit_id"], ["habits.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("habit_id", "completed_date", name="uq_habit_completion_day"),
    )
    op.create_index("ix_habit_completions_habit_id", "habit_completions", ["habit_id"])
    op.create_index("ix_habit_completions_user_id", "habit_completions", ["user_id"])
    op.create_index("ix_habit_completions_completed_date", "habit_completions", ["completed_date"])


def downgrade() -> None:
    op.drop_index("ix_habit_completions_completed_date", table_name="habit_completions")
    op.drop_index("ix_habit_completions_user_id", table_name="habit_completions")
    op.drop_index("ix_habit_completions_habit_id", table_name="habit_completions")
    op.drop_table("habit_completions")
    op.drop_index("ix_habits_user_id", table_name="habits")
    op.drop_table("habits")
    sa.Enum(name="habit_status_enum").drop(op.get_bind(), checkfirst=True)
