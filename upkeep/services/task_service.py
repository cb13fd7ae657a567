from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime, time
from typing import Callable

from upkeep.domain.buckets import TaskBuckets, classify_tasks
from upkeep.domain.entities import CompletionRecord, TaskEntity
from upkeep.domain.enums import Recurrence
from upkeep.domain.errors import NotFoundError, ValidationError
from upkeep.domain.filters import TaskFilters, apply_filters
from upkeep.domain.recurrence import DEFAULT_DUE_SOON_DAYS, compute_next_due
from upkeep.infra.repository import UpkeepRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "title",
    "description",
    "category_id",
    "recurrence",
    "recurrence_interval",
    "next_due_at",
    "is_active",
})
CREATE_FIELDS = EDITABLE_FIELDS - {"is_active"}


def new_id() -> str:
    return uuid.uuid4().hex


class TaskService:
    """Owns the task and completion collections and the completion protocol.

    State lives in memory and is written through to the repository. Every
    mutation validates first, writes to storage second and touches memory
    last, so a failed call leaves the previous state in place.
    """

    def __init__(
        self,
        repo: UpkeepRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self._tasks: dict[str, TaskEntity] = {}
        self._completions: list[CompletionRecord] = []

    def load(self) -> None:
        tasks = self._repo.list_tasks()
        completions = self._repo.list_completions()
        self._tasks = {task.id: task for task in tasks}
        self._completions = list(completions)
        logger.info("Loaded tasks=%s completions=%s", len(self._tasks), len(self._completions))

    # ---- queries ----

    def list_tasks(self, filters: TaskFilters | None = None) -> list[TaskEntity]:
        return apply_filters(self._tasks.values(), filters or TaskFilters())

    def get_task(self, task_id: str) -> TaskEntity:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        return task

    def completions(self, task_id: str | None = None) -> list[CompletionRecord]:
        records = [c for c in self._completions if task_id is None or c.task_id == task_id]
        return sorted(records, key=lambda c: c.completed_at, reverse=True)

    def completions_by_day(self) -> dict[date, list[CompletionRecord]]:
        grouped: dict[date, list[CompletionRecord]] = {}
        for record in self.completions():
            grouped.setdefault(record.completed_at.date(), []).append(record)
        return grouped

    def buckets(self, horizon_days: int = DEFAULT_DUE_SOON_DAYS) -> TaskBuckets:
        return classify_tasks(self._tasks.values(), self._clock(), horizon_days)

    # ---- mutations ----

    def create_task(self, data: dict) -> TaskEntity:
        unknown = set(data) - CREATE_FIELDS
        if unknown:
            raise ValidationError(f"unsupported fields: {', '.join(sorted(unknown))}")
        normalized = self._normalize_data(data)
        if not normalized.get("title"):
            raise ValidationError("title is required")
        if not normalized.get("category_id"):
            raise ValidationError("category_id is required")

        now = self._clock()
        task = TaskEntity(
            id=new_id(),
            title=normalized["title"],
            description=normalized.get("description"),
            category_id=normalized["category_id"],
            recurrence=normalized.get("recurrence", Recurrence.ONCE),
            recurrence_interval=normalized.get("recurrence_interval"),
            next_due_at=normalized.get("next_due_at") or now,
            last_completed_at=None,
            created_at=now,
            is_active=True,
        )
        self._repo.put_task(task)
        self._tasks[task.id] = task
        logger.info("Task created id=%s recurrence=%s due=%s", task.id, task.recurrence, task.next_due_at)
        return task

    def update_task(self, task_id: str, data: dict) -> TaskEntity:
        task = self.get_task(task_id)
        unknown = set(data) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"fields cannot be edited: {', '.join(sorted(unknown))}")
        normalized = self._normalize_data(data)
        if "title" in normalized and not normalized["title"]:
            raise ValidationError("title is required")
        if "category_id" in normalized and not normalized["category_id"]:
            raise ValidationError("category_id is required")
        if _is_terminal(task):
            self._guard_terminal(task, normalized)

        updated = replace(task, **normalized)
        self._repo.put_task(updated)
        self._tasks[task_id] = updated
        logger.info("Task updated id=%s fields=%s", task_id, ",".join(sorted(normalized)))
        return updated

    def delete_task(self, task_id: str) -> None:
        self.get_task(task_id)
        self._repo.delete_task(task_id)
        del self._tasks[task_id]
        before = len(self._completions)
        self._completions = [c for c in self._completions if c.task_id != task_id]
        logger.info("Task deleted id=%s completions_removed=%s", task_id, before - len(self._completions))

    def complete_task(self, task_id: str, notes: str | None = None) -> CompletionRecord:
        task = self.get_task(task_id)
        if _is_terminal(task):
            raise ValidationError(f"one-time task is already completed: {task_id}")
        completed_at = self._clock()
        record = CompletionRecord(
            id=new_id(),
            task_id=task_id,
            completed_at=completed_at,
            notes=notes.strip() if notes and notes.strip() else None,
        )

        if task.recurrence is Recurrence.ONCE:
            updated = replace(task, is_active=False, last_completed_at=completed_at)
        else:
            updated = replace(
                task,
                next_due_at=compute_next_due(task.recurrence, completed_at, task.recurrence_interval),
                is_active=True,
                last_completed_at=completed_at,
            )

        self._repo.record_completion(updated, record)
        self._tasks[task_id] = updated
        self._completions.append(record)
        logger.info(
            "Task completed id=%s recurrence=%s next_due=%s active=%s",
            task_id,
            updated.recurrence,
            updated.next_due_at,
            updated.is_active,
        )
        return record

    # ---- helpers ----

    def _normalize_data(self, data: dict) -> dict:
        normalized = dict(data)
        if "title" in normalized:
            normalized["title"] = (normalized["title"] or "").strip()
        if "description" in normalized:
            normalized["description"] = (normalized["description"] or "").strip() or None
        if "recurrence" in normalized:
            try:
                normalized["recurrence"] = Recurrence(normalized["recurrence"])
            except ValueError as exc:
                raise ValidationError(f"unknown recurrence: {normalized['recurrence']!r}") from exc
        if "recurrence_interval" in normalized:
            normalized["recurrence_interval"] = _validate_interval(normalized["recurrence_interval"])
        if "next_due_at" in normalized:
            normalized["next_due_at"] = _to_datetime(normalized["next_due_at"])
        if "is_active" in normalized and not isinstance(normalized["is_active"], bool):
            raise ValidationError("is_active must be a boolean")
        return normalized

    @staticmethod
    def _guard_terminal(task: TaskEntity, changes: dict) -> None:
        if changes.get("is_active") is True:
            raise ValidationError(f"completed one-time task cannot be reactivated: {task.id}")
        if "recurrence" in changes and changes["recurrence"] is not Recurrence.ONCE:
            raise ValidationError(f"completed one-time task cannot be rescheduled: {task.id}")
        if "next_due_at" in changes and changes["next_due_at"] != task.next_due_at:
            raise ValidationError(f"completed one-time task cannot be rescheduled: {task.id}")


def _is_terminal(task: TaskEntity) -> bool:
    return (
        not task.is_active
        and task.recurrence is Recurrence.ONCE
        and task.last_completed_at is not None
    )


def _validate_interval(value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("recurrence_interval must be a whole number of days")
    if value < 1:
        raise ValidationError("recurrence_interval must be at least 1 day")
    return value


def _to_datetime(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise ValidationError("next_due_at must be a date or datetime")
