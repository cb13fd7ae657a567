"""create tasks, completions and categories tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_tasks"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tasks",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category_id", sa.String(length=64), nullable=False),
        sa.Column("recurrence", sa.String(length=20), nullable=False, server_default="once"),
        sa.Column("recurrence_interval", sa.Integer(), nullable=True),
        sa.Column("next_due_at", sa.DateTime(), nullable=False),
        sa.Column("last_completed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_tasks_category_id", "tasks", ["category_id"], unique=False)
    op.create_index("ix_tasks_next_due_at", "tasks", ["next_due_at"], unique=False)
    op.create_index("ix_tasks_created_at", "tasks", ["created_at"], unique=False)
    op.create_index("ix_tasks_is_active", "tasks", ["is_active"], unique=False)

    op.create_table(
        "completions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("task_id", sa.String(length=36), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_completions_task_id", "completions", ["task_id"], unique=False)
    op.create_index("ix_completions_completed_at", "completions", ["completed_at"], unique=False)

    op.create_table(
        "categories",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("icon", sa.String(length=50), nullable=False, server_default="Wrench"),
        sa.Column("color", sa.String(length=20), nullable=False, server_default="#6B7280"),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_categories_is_default", "categories", ["is_default"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_categories_is_default", table_name="categories")
    op.drop_table("categories")
    op.drop_index("ix_completions_completed_at", table_name="completions")
    op.drop_index("ix_completions_task_id", table_name="completions")
    op.drop_table("completions")
    op.drop_index("ix_tasks_is_active", table_name="tasks")
    op.drop_index("ix_tasks_created_at", table_name="tasks")
    op.drop_index("ix_tasks_next_due_at", table_name="tasks")
    op.drop_index("ix_tasks_category_id", table_name="tasks")
    op.drop_table("tasks")
