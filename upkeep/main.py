from __future__ import annotations

import logging
import sys

from upkeep.config import SETTINGS
from upkeep.domain.errors import StorageError
from upkeep.infra.db import init_db, migrate_db
from upkeep.infra.llm import OpenAISuggestionProvider
from upkeep.infra.logging import setup_logging
from upkeep.infra.repository import UpkeepRepository
from upkeep.services.category_service import CategoryService
from upkeep.services.suggestions import SuggestionService
from upkeep.services.task_service import TaskService

logger = logging.getLogger(__name__)


class UpkeepApp:
    """Wires the services to a shared repository."""

    def __init__(self, repo: UpkeepRepository, suggestions: SuggestionService) -> None:
        self.repo = repo
        self.tasks = TaskService(repo)
        self.categories = CategoryService(repo)
        self.suggestions = suggestions

    def load(self) -> None:
        self.categories.load()
        self.tasks.load()


def bootstrap() -> UpkeepApp:
    init_db()
    migrate_db()
    app = UpkeepApp(UpkeepRepository(), SuggestionService(OpenAISuggestionProvider.from_settings()))
    app.load()
    return app


def main() -> None:
    setup_logging()
    try:
        app = bootstrap()
    except StorageError as exc:
        logger.error("Startup failed: %s", exc)
        sys.exit(1)

    counts = app.tasks.buckets(SETTINGS.due_soon_days).counts()
    logger.info(
        "Dashboard active=%s overdue=%s today=%s soon=%s upcoming=%s",
        counts["total"],
        counts["overdue"],
        counts["due_today"],
        counts["due_soon"],
        counts["upcoming"],
    )


if __name__ == "__main__":
    main()
