"""add mood_entries table

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18

One row per (user_id, date); saving again updates the row in place.
"""
from alembic import op
import sqlalchemy as sa

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    mood_enum = sa.Enum("great", "good", "okay", "bad", "terrible", name="mood_enum")
    mood_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "mood_entries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("mood", sa.Enum(
            "great", "good", "okay", "bad", "terrible", name="mood_enum", create_type=False,
        ), nullable=False),
        sa.Column("emoji", sa.String(16), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_mood_entries_user_id", "mood_entries", ["user_id"])
    op.create_index("ix_mood_entries_date", "mood_entries", ["date"])
    op.create_unique_constraint("uq_mood_user_date", "mood_entries", ["user_id", "date"])


def downgrade() -> None:
    op.drop_constraint("uq_mood_user_date", "mood_entries", type_="unique")
    op.drop_index("ix_mood_entries_date", table_name="mood_entries")
    op.drop_index("ix_mood_entries_user_id", table_name="mood_entries")
    op.drop_table("mood_entries")
    sa.Enum(name="mood_enum").drop(op.get_bind(), checkfirst=True)
