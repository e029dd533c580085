"""Tests for the structured-generation client."""
from types import SimpleNamespace

import httpx
import openai
import pytest

from tripsheet.config import get_llm_config, settings
from tripsheet.errors import ExtractionFailed, MissingCredential
from tripsheet.services.llm_client import StructuredLLMClient, parse_json_response


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client_with(completions) -> StructuredLLMClient:
    client = StructuredLLMClient()
    client.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "llm_api_key", "test-key")
    monkeypatch.setattr(settings, "llm_provider", "gemini")


class TestStructuredLLMClient:

    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_api_key", "")
        monkeypatch.setattr(settings, "llm_provider", "openai")
        with pytest.raises(MissingCredential):
            StructuredLLMClient()

    def test_ollama_needs_no_key(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_api_key", "")
        monkeypatch.setattr(settings, "llm_provider", "ollama")
        monkeypatch.setattr(settings, "llm_base_url", "")
        assert get_llm_config()["base_url"] == "http://localhost:11434/v1"
        StructuredLLMClient()

    @pytest.mark.asyncio
    async def test_requests_json_schema(self, api_key, monkeypatch):
        monkeypatch.setattr(settings, "llm_structured_output", True)
        completions = FakeCompletions(content='{"tripTitle": "x", "days": []}')
        client = _client_with(completions)

        text = await client.generate("system", "instruction", {"type": "object"})

        assert text == '{"tripTitle": "x", "days": []}'
        response_format = completions.kwargs["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["schema"] == {"type": "object"}
        assert completions.kwargs["messages"][1]["content"] == "instruction"

    @pytest.mark.asyncio
    async def test_schema_in_prompt_without_structured_output(self, api_key, monkeypatch):
        monkeypatch.setattr(settings, "llm_structured_output", False)
        completions = FakeCompletions(content="{}")
        client = _client_with(completions)

        await client.generate("system", "instruction", {"title": "Trip"})

        assert completions.kwargs["response_format"] == {"type": "json_object"}
        assert '"title": "Trip"' in completions.kwargs["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_empty_content_is_none(self, api_key):
        client = _client_with(FakeCompletions(content=None))
        assert await client.generate("system", "instruction", {}) is None

    @pytest.mark.asyncio
    async def test_api_error(self, api_key):
        error = openai.APIConnectionError(request=httpx.Request("POST", "https://example.invalid"))
        client = _client_with(FakeCompletions(error=error))
        with pytest.raises(ExtractionFailed):
            await client.generate("system", "instruction", {})


class TestParseJsonResponse:

    def test_plain(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_markdown_fence(self):
        assert parse_json_response('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_surrounding_text(self):
        assert parse_json_response('Result: {"a": 1} done') == {"a": 1}

    def test_garbage(self):
        with pytest.raises(ValueError):
            parse_json_response("no json here")

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_numbers_are_rejected(self, constant):
        with pytest.raises(ValueError, match="Non-finite"):
            parse_json_response(f'{{"lat": {constant}, "lng": 140.1}}')

    def test_non_finite_number_inside_fence(self):
        with pytest.raises(ValueError):
            parse_json_response('```json\n{"lat": NaN}\n```')
