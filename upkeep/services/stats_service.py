from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable

from dateutil.relativedelta import relativedelta

from upkeep.domain.entities import CategoryEntity, CompletionRecord, TaskEntity

TOP_TASK_LIMIT = 5


@dataclass(frozen=True)
class CategoryCount:
    category: CategoryEntity
    count: int


@dataclass(frozen=True)
class TaskCount:
    task: TaskEntity
    category: CategoryEntity | None
    count: int


@dataclass(frozen=True)
class CompletionStats:
    total: int
    this_week: int
    this_month: int
    by_category: list[CategoryCount] = field(default_factory=list)
    top_tasks: list[TaskCount] = field(default_factory=list)


def compute_stats(
    tasks: Iterable[TaskEntity],
    completions: Iterable[CompletionRecord],
    categories: Iterable[CategoryEntity],
    now: datetime,
) -> CompletionStats:
    """Aggregate completion history for the statistics view.

    Weeks start on Monday. Completions of deleted tasks count toward the
    totals but not toward categories or the top-task ranking.
    """
    task_map = {task.id: task for task in tasks}
    category_map = {category.id: category for category in categories}
    records = list(completions)

    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = today - timedelta(days=today.weekday())
    week_end = week_start + timedelta(weeks=1)
    month_start = today.replace(day=1)
    month_end = month_start + relativedelta(months=1)

    per_category: Counter[str] = Counter()
    per_task: Counter[str] = Counter()
    for record in records:
        per_task[record.task_id] += 1
        task = task_map.get(record.task_id)
        if task is not None:
            per_category[task.category_id] += 1

    by_category = sorted(
        (CategoryCount(category, per_category.get(category.id, 0)) for category in category_map.values()),
        key=lambda item: item.count,
        reverse=True,
    )

    top_tasks = []
    for task_id, count in per_task.most_common():
        task = task_map.get(task_id)
        if task is None:
            continue
        top_tasks.append(TaskCount(task, category_map.get(task.category_id), count))
        if len(top_tasks) == TOP_TASK_LIMIT:
            break

    return CompletionStats(
        total=len(records),
        this_week=sum(1 for r in records if week_start <= r.completed_at < week_end),
        this_month=sum(1 for r in records if month_start <= r.completed_at < month_end),
        by_category=by_category,
        top_tasks=top_tasks,
    )
