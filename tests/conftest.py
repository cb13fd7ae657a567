from __future__ import annotations

from datetime import datetime

import pytest

from upkeep.domain.entities import CategoryEntity, CompletionRecord, TaskEntity
from upkeep.domain.errors import StorageError
from upkeep.services.task_service import TaskService


class FakeRepo:
    def __init__(self) -> None:
        self.tasks: dict[str, TaskEntity] = {}
        self.completions: list[CompletionRecord] = []
        self.categories: dict[str, CategoryEntity] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise StorageError("storage offline")

    def list_tasks(self) -> list[TaskEntity]:
        self._check()
        return list(self.tasks.values())

    def get_task(self, task_id: str) -> TaskEntity | None:
        self._check()
        return self.tasks.get(task_id)

    def put_task(self, task: TaskEntity) -> None:
        self._check()
        self.tasks[task.id] = task

    def delete_task(self, task_id: str) -> None:
        self._check()
        self.tasks.pop(task_id, None)
        self.delete_completions_by_task(task_id)

    def list_completions(self) -> list[CompletionRecord]:
        self._check()
        return list(self.completions)

    def put_completion(self, record: CompletionRecord) -> None:
        self._check()
        self.completions.append(record)

    def delete_completions_by_task(self, task_id: str) -> None:
        self._check()
        self.completions = [c for c in self.completions if c.task_id != task_id]

    def record_completion(self, task: TaskEntity, record: CompletionRecord) -> None:
        self._check()
        self.completions.append(record)
        self.tasks[task.id] = task

    def list_categories(self) -> list[CategoryEntity]:
        self._check()
        return list(self.categories.values())

    def count_categories(self) -> int:
        self._check()
        return len(self.categories)

    def put_category(self, category: CategoryEntity) -> None:
        self._check()
        self.categories[category.id] = category

    def delete_category(self, category_id: str) -> None:
        self._check()
        self.categories.pop(category_id, None)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 1, 10, 9, 30))


@pytest.fixture()
def service(repo: FakeRepo, clock: FrozenClock) -> TaskService:
    return TaskService(repo, clock=clock)
