from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from upkeep.domain.entities import CategoryEntity, CompletionRecord, TaskEntity
from upkeep.domain.enums import Recurrence
from upkeep.domain.errors import StorageError

from .db import SessionLocal
from .models import CategoryModel, CompletionModel, TaskModel

logger = logging.getLogger(__name__)


def _to_task(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        category_id=model.category_id,
        recurrence=Recurrence(model.recurrence),
        recurrence_interval=model.recurrence_interval,
        next_due_at=model.next_due_at,
        last_completed_at=model.last_completed_at,
        created_at=model.created_at,
        is_active=bool(model.is_active),
    )


def _from_task(task: TaskEntity) -> TaskModel:
    return TaskModel(
        id=task.id,
        title=task.title,
        description=task.description,
        category_id=task.category_id,
        recurrence=task.recurrence.value,
        recurrence_interval=task.recurrence_interval,
        next_due_at=task.next_due_at,
        last_completed_at=task.last_completed_at,
        created_at=task.created_at,
        is_active=task.is_active,
    )


def _to_completion(model: CompletionModel) -> CompletionRecord:
    return CompletionRecord(
        id=model.id,
        task_id=model.task_id,
        completed_at=model.completed_at,
        notes=model.notes,
    )


def _from_completion(record: CompletionRecord) -> CompletionModel:
    return CompletionModel(
        id=record.id,
        task_id=record.task_id,
        completed_at=record.completed_at,
        notes=record.notes,
    )


def _to_category(model: CategoryModel) -> CategoryEntity:
    return CategoryEntity(
        id=model.id,
        name=model.name,
        icon=model.icon,
        color=model.color,
        is_default=bool(model.is_default),
    )


class UpkeepRepository:
    """SQLAlchemy-backed store for tasks, completion records and categories.

    Every public method runs in its own session. Driver failures are raised
    as ``StorageError`` with the original exception chained.
    """

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Storage call failed action=%s error=%s", action, exc)
            raise StorageError(f"{action} failed: {exc}") from exc

    # ---- tasks ----

    def list_tasks(self) -> list[TaskEntity]:
        with self._session("list_tasks") as session:
            stmt = select(TaskModel).order_by(TaskModel.next_due_at.asc(), TaskModel.created_at.asc())
            return [_to_task(task) for task in session.scalars(stmt)]

    def get_task(self, task_id: str) -> Optional[TaskEntity]:
        with self._session("get_task") as session:
            task = session.get(TaskModel, task_id)
            return _to_task(task) if task else None

    def put_task(self, task: TaskEntity) -> None:
        with self._session("put_task") as session:
            session.merge(_from_task(task))
            session.commit()

    def delete_task(self, task_id: str) -> None:
        with self._session("delete_task") as session:
            session.execute(delete(CompletionModel).where(CompletionModel.task_id == task_id))
            session.execute(delete(TaskModel).where(TaskModel.id == task_id))
            session.commit()

    # ---- completions ----

    def list_completions(self) -> list[CompletionRecord]:
        with self._session("list_completions") as session:
            stmt = select(CompletionModel).order_by(CompletionModel.completed_at.asc())
            return [_to_completion(record) for record in session.scalars(stmt)]

    def put_completion(self, record: CompletionRecord) -> None:
        with self._session("put_completion") as session:
            session.add(_from_completion(record))
            session.commit()

    def delete_completions_by_task(self, task_id: str) -> None:
        with self._session("delete_completions_by_task") as session:
            session.execute(delete(CompletionModel).where(CompletionModel.task_id == task_id))
            session.commit()

    def record_completion(self, task: TaskEntity, record: CompletionRecord) -> None:
        with self._session("record_completion") as session:
            session.add(_from_completion(record))
            session.merge(_from_task(task))
            session.commit()

    # ---- categories ----

    def list_categories(self) -> list[CategoryEntity]:
        with self._session("list_categories") as session:
            stmt = select(CategoryModel).order_by(
                CategoryModel.is_default.desc(),
                CategoryModel.name.asc(),
            )
            return [_to_category(category) for category in session.scalars(stmt)]

    def count_categories(self) -> int:
        with self._session("count_categories") as session:
            return session.scalar(select(func.count()).select_from(CategoryModel)) or 0

    def put_category(self, category: CategoryEntity) -> None:
        with self._session("put_category") as session:
            session.merge(
                CategoryModel(
                    id=category.id,
                    name=category.name,
                    icon=category.icon,
                    color=category.color,
                    is_default=category.is_default,
                )
            )
            session.commit()

    def delete_category(self, category_id: str) -> None:
        with self._session("delete_category") as session:
            session.execute(delete(CategoryModel).where(CategoryModel.id == category_id))
            session.commit()
