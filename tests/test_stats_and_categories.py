from __future__ import annotations

from datetime import datetime

import pytest

from upkeep.domain.entities import DEFAULT_CATEGORIES, CategoryEntity, CompletionRecord, TaskEntity
from upkeep.domain.enums import Recurrence
from upkeep.domain.errors import NotFoundError, ValidationError
from upkeep.services.category_service import CategoryService
from upkeep.services.stats_service import compute_stats


def _task(task_id: str, category_id: str) -> TaskEntity:
    return TaskEntity(
        id=task_id,
        title=f"Task {task_id}",
        description=None,
        category_id=category_id,
        recurrence=Recurrence.DAILY,
        recurrence_interval=None,
        next_due_at=datetime(2024, 1, 20),
        last_completed_at=None,
        created_at=datetime(2023, 12, 1),
    )


def test_compute_stats_windows_and_rankings() -> None:
    # Wednesday 2024-01-17; week starts Monday 2024-01-15.
    now = datetime(2024, 1, 17, 12, 0)
    cleaning = CategoryEntity("cleaning", "General Cleaning", "SprayCan", "#10B981", True)
    filters = CategoryEntity("filters", "Filter Maintenance", "Wind", "#8B5CF6", True)
    tasks = [_task("a", "cleaning"), _task("b", "filters"), _task("c", "deleted-category")]
    completions = [
        CompletionRecord("1", "a", datetime(2024, 1, 15, 0, 0)),
        CompletionRecord("2", "a", datetime(2024, 1, 16, 8, 0)),
        CompletionRecord("3", "b", datetime(2024, 1, 14, 23, 59)),
        CompletionRecord("4", "c", datetime(2024, 1, 2, 9, 0)),
        CompletionRecord("5", "gone", datetime(2023, 12, 31, 9, 0)),
    ]

    stats = compute_stats(tasks, completions, [filters, cleaning], now)

    assert stats.total == 5
    assert stats.this_week == 2
    assert stats.this_month == 4
    assert [(c.category.id, c.count) for c in stats.by_category] == [("cleaning", 2), ("filters", 1)]
    assert [(t.task.id, t.count) for t in stats.top_tasks] == [("a", 2), ("b", 1), ("c", 1)]
    assert stats.top_tasks[2].category is None


def test_compute_stats_empty_history() -> None:
    stats = compute_stats([], [], DEFAULT_CATEGORIES, datetime(2024, 1, 17))
    assert stats.total == 0
    assert stats.top_tasks == []
    assert all(item.count == 0 for item in stats.by_category)


def test_category_service_seeds_defaults(repo) -> None:
    categories = CategoryService(repo)
    categories.load()

    assert len(categories.list_categories()) == len(DEFAULT_CATEGORIES)
    assert all(c.is_default for c in categories.list_categories())


def test_category_crud_without_cascade(repo, service) -> None:
    categories = CategoryService(repo)
    categories.load()
    garden = categories.create_category(" Garden ", icon="Flower", color="#22C55E")
    task = service.create_task({"title": "Mow lawn", "category_id": garden.id, "recurrence": "weekly"})

    renamed = categories.update_category(garden.id, {"name": "Garden & Yard"})
    categories.delete_category(garden.id)

    assert renamed.name == "Garden & Yard"
    assert garden.is_default is False
    assert categories.get_category(garden.id) is None
    assert service.get_task(task.id).category_id == garden.id
    with pytest.raises(NotFoundError):
        categories.require_category(garden.id)


def test_category_validation(repo) -> None:
    categories = CategoryService(repo)
    categories.load()
    with pytest.raises(ValidationError):
        categories.create_category("  ")
    with pytest.raises(ValidationError):
        categories.update_category("cleaning", {"is_default": False})
    with pytest.raises(ValidationError):
        categories.update_category("cleaning", {"name": ""})
