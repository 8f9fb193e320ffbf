"""Initial StudyPace schema."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "202610170900"
down_revision = None
branch_labels = None
depends_on = None


def _uuid(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), **kwargs)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))


def upgrade() -> None:
    op.create_table(
        "subjects",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("color", sa.String(length=16), nullable=False),
        _created_at(),
    )
    op.create_index("ix_subjects_user_id", "subjects", ["user_id"], unique=False)

    op.create_table(
        "topics",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("subject_id", nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_topics_subject_id", "topics", ["subject_id"], unique=False)

    op.create_table(
        "sub_topics",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("topic_id", nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_sub_topics_topic_id", "sub_topics", ["topic_id"], unique=False)

    op.create_table(
        "tasks",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        _uuid("topic_id", nullable=True),
        _uuid("sub_topic_id", nullable=True),
        sa.Column("priority", sa.String(length=10), nullable=False, server_default=sa.text("'medium'")),
        sa.Column("difficulty", sa.Integer(), nullable=True),
        sa.Column("confidence", sa.Integer(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["sub_topic_id"], ["sub_topics.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_tasks_user_id", "tasks", ["user_id"], unique=False)
    op.create_index("ix_tasks_due_date", "tasks", ["due_date"], unique=False)
    op.create_index("ix_tasks_is_completed", "tasks", ["is_completed"], unique=False)

    op.create_table(
        "capacity",
        _uuid("user_id", primary_key=True, nullable=False),
        sa.Column("max_tasks_per_day", sa.Integer(), nullable=False),
        sa.Column("default_focus_minutes", sa.Integer(), nullable=False),
        sa.Column("default_break_minutes", sa.Integer(), nullable=False),
        sa.Column("max_daily_focus_minutes", sa.Integer(), nullable=False),
        sa.Column("recommended_sessions_per_day", sa.Integer(), nullable=False),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "capacity_overrides",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("override_type", sa.String(length=20), nullable=False),
        sa.Column("original_limit", sa.Integer(), nullable=False),
        sa.Column("override_value", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_capacity_overrides_user_id", "capacity_overrides", ["user_id"], unique=False)

    op.create_table(
        "exam_modes",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("exam_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _created_at(),
    )
    op.create_index("ix_exam_modes_user_id", "exam_modes", ["user_id"], unique=False)

    op.create_table(
        "exam_tasks",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("exam_id", nullable=False),
        _uuid("task_id", nullable=False),
        sa.ForeignKeyConstraint(["exam_id"], ["exam_modes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_exam_tasks_exam_id", "exam_tasks", ["exam_id"], unique=False)

    op.create_table(
        "missed_task_reasons",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("task_id", nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("reason", sa.String(length=20), nullable=False),
        sa.Column("original_due_date", sa.Date(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_missed_task_reasons_user_id", "missed_task_reasons", ["user_id"], unique=False)

    op.create_table(
        "user_streaks",
        _uuid("user_id", primary_key=True, nullable=False),
        sa.Column("current_streak_days", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_active_date", sa.Date(), nullable=True),
        _updated_at(),
    )

    op.create_table(
        "focus_sessions",
        _uuid("id", primary_key=True, nullable=False),
        _uuid("user_id", nullable=False),
        _uuid("subject_id", nullable=False),
        _uuid("topic_id", nullable=True),
        _uuid("sub_topic_id", nullable=True),
        _uuid("task_id", nullable=True),
        _uuid("auto_created_task_id", nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=False),
        sa.Column("target_duration_seconds", sa.Integer(), nullable=True),
        sa.Column("session_quality", sa.String(length=20), nullable=True),
        sa.Column("session_note", sa.Text(), nullable=True),
        sa.Column("session_type", sa.String(length=30), nullable=False, server_default=sa.text("'focus'")),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=False),
        _created_at(),
    )
    op.create_index("ix_focus_sessions_user_id", "focus_sessions", ["user_id"], unique=False)
    op.create_index("ix_focus_sessions_started_at", "focus_sessions", ["started_at"], unique=False)

    answer_columns = [
        sa.Column(name, sa.String(length=30), nullable=True)
        for name in (
            "age_range",
            "role",
            "primary_goal",
            "focus_difficulty",
            "attention_diagnosis",
            "peak_energy_time",
            "daily_focus_capacity",
            "main_drain",
            "consistency_span",
            "miss_day_response",
            "overload_response",
            "planning_style",
            "guidance_level",
            "exam_proximity",
        )
    ]
    op.create_table(
        "user_profiles",
        _uuid("user_id", primary_key=True, nullable=False),
        *answer_columns,
        sa.Column("biggest_struggle", sa.Text(), nullable=True),
        sa.Column("personal_notes", sa.Text(), nullable=True),
        sa.Column("study_persona", sa.String(length=40), nullable=True),
        sa.Column("selected_plan_id", sa.String(length=40), nullable=True),
        _created_at(),
        _updated_at(),
    )


def downgrade() -> None:
    op.drop_table("user_profiles")
    op.drop_index("ix_focus_sessions_started_at", table_name="focus_sessions")
    op.drop_index("ix_focus_sessions_user_id", table_name="focus_sessions")
    op.drop_table("focus_sessions")
    op.drop_table("user_streaks")
    op.drop_index("ix_missed_task_reasons_user_id", table_name="missed_task_reasons")
    op.drop_table("missed_task_reasons")
    op.drop_index("ix_exam_tasks_exam_id", table_name="exam_tasks")
    op.drop_table("exam_tasks")
    op.drop_index("ix_exam_modes_user_id", table_name="exam_modes")
    op.drop_table("exam_modes")
    op.drop_index("ix_capacity_overrides_user_id", table_name="capacity_overrides")
    op.drop_table("capacity_overrides")
    op.drop_table("capacity")
    op.drop_index("ix_tasks_is_completed", table_name="tasks")
    op.drop_index("ix_tasks_due_date", table_name="tasks")
    op.drop_index("ix_tasks_user_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("ix_sub_topics_topic_id", table_name="sub_topics")
    op.drop_table("sub_topics")
    op.drop_index("ix_topics_subject_id", table_name="topics")
    op.drop_table("topics")
    op.drop_index("ix_subjects_user_id", table_name="subjects")
    op.drop_table("subjects")
