from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .entities import TaskEntity


@dataclass(frozen=True)
class TaskFilters:
    active_only: bool = False
    category_id: str | None = None
    search: str | None = None

    def matches(self, task: TaskEntity) -> bool:
        if self.active_only and not task.is_active:
            return False
        if self.category_id and task.category_id != self.category_id:
            return False
        if self.search:
            needle = self.search.casefold()
            haystack = f"{task.title} {task.description or ''}".casefold()
            if needle not in haystack:
                return False
        return True


def apply_filters(tasks: Iterable[TaskEntity], filters: TaskFilters) -> list[TaskEntity]:
    selected = [task for task in tasks if filters.matches(task)]
    selected.sort(key=lambda task: (task.next_due_at, task.created_at))
    return selected
