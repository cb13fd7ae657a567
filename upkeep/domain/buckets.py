from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from .entities import TaskEntity
from .recurrence import DEFAULT_DUE_SOON_DAYS, is_due_soon, is_due_today, is_overdue


@dataclass(frozen=True)
class TaskBuckets:
    overdue: list[TaskEntity] = field(default_factory=list)
    due_today: list[TaskEntity] = field(default_factory=list)
    due_soon: list[TaskEntity] = field(default_factory=list)
    upcoming: list[TaskEntity] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "total": len(self.overdue) + len(self.due_today) + len(self.due_soon) + len(self.upcoming),
            "overdue": len(self.overdue),
            "due_today": len(self.due_today),
            "due_soon": len(self.due_soon),
            "upcoming": len(self.upcoming),
        }


def classify_tasks(
    tasks: Iterable[TaskEntity],
    now: datetime,
    horizon_days: int = DEFAULT_DUE_SOON_DAYS,
) -> TaskBuckets:
    """Partition active tasks into due-date buckets.

    ``now`` is reduced to a calendar day once, so every task in a single call
    is judged against the same day. Inactive tasks are never bucketed.
    """
    today = now.date()
    buckets = TaskBuckets()
    for task in sorted(tasks, key=lambda t: (t.next_due_at, t.created_at)):
        if not task.is_active:
            continue
        due = task.next_due_at
        if is_overdue(due, today):
            buckets.overdue.append(task)
        elif is_due_today(due, today):
            buckets.due_today.append(task)
        elif is_due_soon(due, horizon_days, today):
            buckets.due_soon.append(task)
        else:
            buckets.upcoming.append(task)
    return buckets
