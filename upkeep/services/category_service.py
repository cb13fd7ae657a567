from __future__ import annotations

import logging
from dataclasses import replace

from upkeep.domain.entities import DEFAULT_CATEGORIES, CategoryEntity
from upkeep.domain.errors import NotFoundError, ValidationError
from upkeep.infra.repository import UpkeepRepository

from .task_service import new_id

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = frozenset({"name", "icon", "color"})


class CategoryService:
    def __init__(self, repo: UpkeepRepository) -> None:
        self._repo = repo
        self._categories: dict[str, CategoryEntity] = {}

    def load(self) -> None:
        self.ensure_defaults()
        self._categories = {c.id: c for c in self._repo.list_categories()}

    def ensure_defaults(self) -> bool:
        """Seed the built-in categories into an empty table."""
        if self._repo.count_categories():
            return False
        for category in DEFAULT_CATEGORIES:
            self._repo.put_category(category)
        logger.info("Seeded default categories count=%s", len(DEFAULT_CATEGORIES))
        return True

    def list_categories(self) -> list[CategoryEntity]:
        return list(self._categories.values())

    def get_category(self, category_id: str) -> CategoryEntity | None:
        # Tasks keep dangling ids after a category is deleted.
        return self._categories.get(category_id)

    def require_category(self, category_id: str) -> CategoryEntity:
        category = self.get_category(category_id)
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    def create_category(self, name: str, icon: str = "Wrench", color: str = "#6B7280") -> CategoryEntity:
        name = (name or "").strip()
        if not name:
            raise ValidationError("category name is required")
        category = CategoryEntity(id=new_id(), name=name, icon=icon, color=color, is_default=False)
        self._repo.put_category(category)
        self._categories[category.id] = category
        logger.info("Category created id=%s name=%s", category.id, name)
        return category

    def update_category(self, category_id: str, data: dict) -> CategoryEntity:
        category = self.require_category(category_id)
        unknown = set(data) - CATEGORY_FIELDS
        if unknown:
            raise ValidationError(f"fields cannot be edited: {', '.join(sorted(unknown))}")
        if "name" in data and not (data["name"] or "").strip():
            raise ValidationError("category name is required")
        changes = {key: value.strip() if isinstance(value, str) else value for key, value in data.items()}
        updated = replace(category, **changes)
        self._repo.put_category(updated)
        self._categories[category_id] = updated
        return updated

    def delete_category(self, category_id: str) -> None:
        self.require_category(category_id)
        self._repo.delete_category(category_id)
        del self._categories[category_id]
        logger.info("Category deleted id=%s", category_id)
