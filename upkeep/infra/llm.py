from __future__ import annotations

import logging

import openai
from openai import OpenAI

from upkeep.config import SETTINGS, Settings
from upkeep.domain.errors import SuggestionProviderError
from upkeep.services.suggestions import MAX_SUGGESTIONS, SuggestionContext

logger = logging.getLogger(__name__)

SUGGEST_PROMPT = """\
Suggest {count} practical household maintenance tasks for a home upkeep tracker.

Context:
- Season: {season}
- Time of day: {time_of_day}
- Number of existing tasks: {existing_task_count}

Reply with a JSON array only, no other text, in exactly this shape:
[
  {{"title": "Task title", "description": "Short description", "categoryKeyword": "Cleaning"}}
]
categoryKeyword is a general keyword such as Cleaning, Maintenance or Kitchen.
"""

SUMMARY_PROMPT = """\
Based on the household task completion history below, write a short, encouraging
analysis for the user (at most 3 sentences). Praise good habits or gently suggest
improvements. Use a friendly, helpful tone.

History:
{history}
"""


class OpenAISuggestionProvider:
    """Suggestion provider backed by an OpenAI-compatible chat completions API."""

    def __init__(self, client: OpenAI, model: str) -> None:
        self._client = client
        self._model = model

    @classmethod
    def from_settings(cls, settings: Settings = SETTINGS) -> "OpenAISuggestionProvider | None":
        if not settings.suggestions_enabled:
            logger.info("Suggestion provider disabled (LLM_API_KEY not set)")
            return None
        client = OpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )
        return cls(client, settings.llm_model)

    def suggest(self, context: SuggestionContext) -> str:
        prompt = SUGGEST_PROMPT.format(
            count=MAX_SUGGESTIONS,
            season=context.season,
            time_of_day=context.time_of_day,
            existing_task_count=context.existing_task_count,
        )
        return self._complete(prompt)

    def summarize(self, history_lines: list[str]) -> str:
        return self._complete(SUMMARY_PROMPT.format(history="\n".join(history_lines)))

    def _complete(self, prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.OpenAIError as exc:
            raise SuggestionProviderError(f"{exc.__class__.__name__}: {exc}") from exc
        if not response.choices:
            raise SuggestionProviderError(f"model returned no choices: {self._model}")
        content = response.choices[0].message.content
        logger.debug("LLM reply model=%s chars=%s", self._model, len(content or ""))
        return content or ""
