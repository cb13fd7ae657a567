from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Protocol

from upkeep.domain.entities import CompletionRecord, TaskEntity
from upkeep.domain.errors import SuggestionParseError, SuggestionProviderError

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3
HISTORY_LIMIT = 20
UNAVAILABLE_MESSAGE = "Suggestions are not configured."
EMPTY_HISTORY_MESSAGE = "Not enough history to analyse yet. Complete a few tasks and try again."
FALLBACK_SUMMARY = "An analysis could not be generated right now."


@dataclass(frozen=True)
class SuggestionContext:
    season: str
    time_of_day: str
    existing_task_count: int


@dataclass(frozen=True)
class TaskSuggestion:
    title: str
    description: str
    category_keyword: str


class SuggestionProvider(Protocol):
    """Text generator behind the suggestion features.

    Both methods return raw, untrusted text. Implementations must report
    every failure as ``SuggestionProviderError``; any other exception is a
    bug in the provider and propagates to the caller.
    """

    def suggest(self, context: SuggestionContext) -> str: ...

    def summarize(self, history_lines: list[str]) -> str: ...


def season_for(day: date) -> str:
    month = day.month
    if month in (12, 1, 2):
        return "winter"
    if month in (3, 4, 5):
        return "spring"
    if month in (6, 7, 8):
        return "summer"
    return "autumn"


def time_of_day_for(moment: datetime) -> str:
    hour = moment.hour
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def parse_suggestions(text: str, limit: int = MAX_SUGGESTIONS) -> list[TaskSuggestion]:
    """Extract task suggestions from a model reply.

    The reply may wrap the JSON array in prose or code fences; the outermost
    ``[...]`` span is decoded. Items without a usable title are dropped.
    """
    if not text or not text.strip():
        raise SuggestionParseError("empty suggestion reply")

    start = text.find("[")
    end = text.rfind("]")
    payload = text[start:end + 1] if start != -1 and end > start else text
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise SuggestionParseError(f"suggestion reply is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise SuggestionParseError("suggestion reply is not a JSON array")

    suggestions = []
    for item in data:
        if not isinstance(item, dict):
            continue
        title = item.get("title")
        if not isinstance(title, str) or not title.strip():
            continue
        description = item.get("description")
        keyword = item.get("categoryKeyword")
        suggestions.append(
            TaskSuggestion(
                title=title.strip(),
                description=description.strip() if isinstance(description, str) else "",
                category_keyword=keyword.strip() if isinstance(keyword, str) and keyword.strip() else "General",
            )
        )
        if len(suggestions) == limit:
            break

    if data and not suggestions:
        raise SuggestionParseError("suggestion reply contained no usable items")
    return suggestions


class SuggestionService:
    def __init__(self, provider: SuggestionProvider | None = None) -> None:
        self._provider = provider

    @property
    def available(self) -> bool:
        return self._provider is not None

    def build_context(self, now: datetime, existing_task_count: int) -> SuggestionContext:
        return SuggestionContext(
            season=season_for(now.date()),
            time_of_day=time_of_day_for(now),
            existing_task_count=existing_task_count,
        )

    def suggest_tasks(self, context: SuggestionContext) -> list[TaskSuggestion]:
        if self._provider is None:
            return []
        try:
            return parse_suggestions(self._provider.suggest(context))
        except (SuggestionProviderError, SuggestionParseError) as exc:
            logger.warning("Task suggestions unavailable: %s", exc)
            return []

    def summarize_history(
        self,
        completions: Iterable[CompletionRecord],
        tasks: Iterable[TaskEntity],
    ) -> str:
        if self._provider is None:
            return UNAVAILABLE_MESSAGE
        records = sorted(completions, key=lambda c: c.completed_at, reverse=True)
        if not records:
            return EMPTY_HISTORY_MESSAGE

        titles = {task.id: task.title for task in tasks}
        lines = [
            f"{titles[record.task_id]} ({record.completed_at.date().isoformat()})"
            for record in records[:HISTORY_LIMIT]
            if record.task_id in titles
        ]
        if not lines:
            return EMPTY_HISTORY_MESSAGE

        try:
            summary = self._provider.summarize(lines)
        except SuggestionProviderError as exc:
            logger.warning("History summary unavailable: %s", exc)
            return FALLBACK_SUMMARY
        return summary.strip() or FALLBACK_SUMMARY
