"""
LLM Client - Structured generation over an OpenAI-compatible API.
Supports Gemini, OpenAI, OpenRouter, and Ollama.
"""
import json
import logging
import re
from typing import Optional

import openai
from openai import AsyncOpenAI

from ..config import get_llm_config, settings
from ..errors import ExtractionFailed, MissingCredential

logger = logging.getLogger(__name__)


class StructuredLLMClient:
    """Async client that asks the model for output matching a JSON schema."""

    def __init__(self):
        config = get_llm_config()

        if not config["api_key"]:
            raise MissingCredential(
                f"API Key is missing. Set LLM_API_KEY for provider '{settings.llm_provider}'."
            )

        self.client = AsyncOpenAI(
            api_key=config["api_key"],
            base_url=config["base_url"],
            timeout=config["timeout"],
        )
        self.model = config["model"]
        self.temperature = config["temperature"]
        self.max_tokens = config["max_tokens"]
        self.structured_output = settings.llm_structured_output

        logger.info(f"Initializing StructuredLLMClient with provider={settings.llm_provider}, model={self.model}")

    async def generate(
        self,
        system_prompt: str,
        instruction: str,
        schema: dict,
        schema_name: str = "trip",
    ) -> Optional[str]:
        """
        Send one structured-generation request.

        Args:
            system_prompt: System message
            instruction: User message (instruction plus raw data)
            schema: JSON Schema the answer must follow
            schema_name: Name reported to the API for the schema

        Returns:
            The raw text of the answer, or None if the model sent nothing
        """
        kwargs = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": instruction},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        if self.structured_output:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": schema},
            }
        else:
            # Schema travels in the prompt instead
            kwargs["response_format"] = {"type": "json_object"}
            kwargs["messages"][0]["content"] += (
                "\n\nReturn ONLY valid JSON matching this schema:\n" + json.dumps(schema, ensure_ascii=False)
            )

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.AuthenticationError as e:
            raise MissingCredential(f"API Key was rejected: {e}") from e
        except openai.OpenAIError as e:
            logger.error(f"LLM request failed: {e}")
            raise ExtractionFailed(f"Extraction service request failed: {e}") from e

        if not response.choices:
            return None
        return response.choices[0].message.content


_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def _reject_constant(name: str):
    # NaN and Infinity are not JSON and do not survive a round trip
    raise ValueError(f"Non-finite number {name} in response")


def _json_candidates(text: str):
    """Yield the slices of a reply that may hold the JSON document, best first."""
    yield text

    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        yield fenced.group(1).strip()

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        yield text[start:end + 1]


def parse_json_response(text: str) -> dict:
    """
    Parse the JSON document out of a model reply.

    Models sometimes wrap the document in a markdown fence or a sentence of
    prose, so each candidate slice is tried in turn.

    Raises:
        ValueError: If no slice parses, or the document holds NaN/Infinity
    """
    text = text.strip()
    for candidate in _json_candidates(text):
        try:
            return json.loads(candidate, parse_constant=_reject_constant)
        except json.JSONDecodeError:
            continue

    raise ValueError(f"No JSON object found in response (length: {len(text)})")


# Global LLM client instance
llm_client: Optional[StructuredLLMClient] = None


def get_llm_client() -> StructuredLLMClient:
    """Get or create the global LLM client."""
    global llm_client
    if llm_client is None:
        llm_client = StructuredLLMClient()
    return llm_client
