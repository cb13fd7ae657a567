from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import Recurrence


@dataclass(frozen=True)
class TaskEntity:
    id: str
    title: str
    description: str | None
    category_id: str
    recurrence: Recurrence
    recurrence_interval: int | None
    next_due_at: datetime
    last_completed_at: Optional[datetime]
    created_at: datetime
    is_active: bool = True


@dataclass(frozen=True)
class CompletionRecord:
    id: str
    task_id: str
    completed_at: datetime
    notes: str | None = None


@dataclass(frozen=True)
class CategoryEntity:
    id: str
    name: str
    icon: str
    color: str
    is_default: bool = False


DEFAULT_CATEGORIES: tuple[CategoryEntity, ...] = (
    CategoryEntity("appliances", "Appliances", "WashingMachine", "#3B82F6", True),
    CategoryEntity("small-appliances", "Small Appliances", "Coffee", "#F59E0B", True),
    CategoryEntity("cleaning", "General Cleaning", "SprayCan", "#10B981", True),
    CategoryEntity("filters", "Filter Maintenance", "Wind", "#8B5CF6", True),
    CategoryEntity("furniture", "Furniture Care", "Sofa", "#EC4899", True),
    CategoryEntity("general", "General Maintenance", "Wrench", "#6B7280", True),
)
