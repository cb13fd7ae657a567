from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from .db import Base


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(String(64), nullable=False, index=True)
    recurrence = Column(String(20), nullable=False, default="once")
    recurrence_interval = Column(Integer, nullable=True)
    next_due_at = Column(DateTime, nullable=False, index=True)
    last_completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)


class CompletionModel(Base):
    __tablename__ = "completions"

    # No FK to tasks: records are removed by the task-deletion cascade.
    id = Column(String(36), primary_key=True)
    task_id = Column(String(36), nullable=False, index=True)
    completed_at = Column(DateTime, nullable=False, index=True)
    notes = Column(Text, nullable=True)


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    icon = Column(String(50), nullable=False, default="Wrench")
    color = Column(String(20), nullable=False, default="#6B7280")
    is_default = Column(Boolean, nullable=False, default=False, index=True)
