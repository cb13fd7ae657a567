from __future__ import annotations

from types import SimpleNamespace

import openai
import pytest

from upkeep.config import Settings
from upkeep.domain.errors import SuggestionProviderError
from upkeep.infra.llm import OpenAISuggestionProvider
from upkeep.main import UpkeepApp
from upkeep.services.suggestions import SuggestionContext, SuggestionService


class FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[dict] = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions: FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_provider_disabled_without_api_key() -> None:
    assert OpenAISuggestionProvider.from_settings(Settings(database_url="sqlite://")) is None


def test_provider_sends_context_in_prompt() -> None:
    completions = FakeCompletions('[{"title": "Clean oven"}]')
    provider = OpenAISuggestionProvider(_client(completions), "test-model")

    reply = provider.suggest(SuggestionContext("summer", "evening", 12))

    assert reply == '[{"title": "Clean oven"}]'
    request = completions.requests[0]
    assert request["model"] == "test-model"
    prompt = request["messages"][0]["content"]
    assert "summer" in prompt and "evening" in prompt and "12" in prompt


def test_provider_wraps_sdk_errors() -> None:
    provider = OpenAISuggestionProvider(_client(FakeCompletions(error=openai.OpenAIError("boom"))), "m")
    with pytest.raises(SuggestionProviderError):
        provider.summarize(["Mop floors (2024-01-05)"])


def test_provider_error_degrades_in_service() -> None:
    provider = OpenAISuggestionProvider(_client(FakeCompletions(error=openai.OpenAIError("boom"))), "m")
    service = SuggestionService(provider)
    assert service.suggest_tasks(SuggestionContext("winter", "night", 0)) == []


def test_none_content_becomes_empty_text() -> None:
    provider = OpenAISuggestionProvider(_client(FakeCompletions(None)), "m")
    assert provider.summarize(["x"]) == ""


def test_app_load_seeds_categories_and_reads_tasks(repo) -> None:
    app = UpkeepApp(repo, SuggestionService())
    app.load()

    task = app.tasks.create_task({"title": "Test sump pump", "category_id": "general", "recurrence": "quarterly"})

    assert app.categories.get_category(task.category_id).name == "General Maintenance"
    assert app.suggestions.available is False
    assert app.tasks.buckets().counts()["total"] == 1


def test_reply_without_choices_is_provider_error() -> None:
    completions = FakeCompletions()
    completions.create = lambda **kwargs: SimpleNamespace(choices=[])
    provider = OpenAISuggestionProvider(_client(completions), "m")
    with pytest.raises(SuggestionProviderError):
        provider.suggest(SuggestionContext("spring", "morning", 1))
