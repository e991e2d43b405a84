"""initial schema moodwell : check-ins, conseils, stats de notes

Revision ID: 001_initial
Create Date: 18/10/2026
"""
from alembic import op
import sqlalchemy as sa

revision = '001_initial'
down_revision = None


def upgrade() -> None:
    op.create_table("checkins",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.String, nullable=False),
        sa.Column("mood_score", sa.Integer, nullable=False),
        sa.Column("energy_level", sa.String, nullable=False),
        sa.Column("free_text", sa.String, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("mood_score BETWEEN 1 AND 5", name="ck_checkins_mood_score"),
    )
    op.create_index("ix_checkins_user_id", "checkins", ["user_id"])
    op.create_index("ix_checkins_created_at", "checkins", ["created_at"])

    op.create_table("interventions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.String, nullable=False),
        sa.Column("checkin_id", sa.Integer, sa.ForeignKey("checkins.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("message_payload", sa.JSON, nullable=False),
        sa.Column("template_type", sa.String, nullable=True),
        sa.Column("enhanced_prompt_used", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("prompt_variation_number", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_fallback", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("feedback_score", sa.Integer, nullable=True),
        sa.Column("feedback_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("feedback_score IS NULL OR feedback_score BETWEEN 1 AND 5", name="ck_interventions_feedback_score"),
        sa.CheckConstraint("prompt_variation_number BETWEEN 0 AND 3", name="ck_interventions_variation"),
    )
    op.create_index("ix_interventions_user_id", "interventions", ["user_id"])
    op.create_index("ix_interventions_created_at", "interventions", ["created_at"])

    op.create_table("user_rating_stats",
        sa.Column("user_id", sa.String, primary_key=True),
        sa.Column("total_ratings", sa.Integer, nullable=False, server_default="0"),
        sa.Column("average_rating", sa.Float, nullable=False, server_default="0"),
        sa.Column("ratings_below_threshold", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_rating_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("enhancement_triggered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table("baseline_traits",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.String, nullable=False),
        sa.Column("traits_result", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_baseline_traits_user_id", "baseline_traits", ["user_id"])


def downgrade() -> None:
    tables = ["baseline_traits", "user_rating_stats", "interventions", "checkins"]
    for table in tables:
        op.drop_table(table)
