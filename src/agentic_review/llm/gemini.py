"""Gemini SDK client with JSON-schema constrained generation."""

import json
import logging
from typing import Any

from agentic_review.config import get_settings
from agentic_review.exceptions import (
    ConfigError,
    GenerationServiceFailure,
    InvalidResponseFormat,
)
from agentic_review.llm.base import BaseLLMClient
from agentic_review.llm.prompts import SYSTEM_INSTRUCTION

logger = logging.getLogger(__name__)

# Raw text included in InvalidResponseFormat messages
MAX_RAW_TEXT_IN_ERROR = 500


def parse_json_response(text: str) -> Any:
    """Decode a JSON-mode response.

    Args:
        text: Raw model output.

    Returns:
        Decoded JSON value.

    Raises:
        InvalidResponseFormat: If the text is not valid JSON.
    """
    stripped = text.strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse Gemini JSON response: {e}")
        raise InvalidResponseFormat(
            f"Could not generate a valid JSON response: {e}. "
            f"Raw response: {stripped[:MAX_RAW_TEXT_IN_ERROR]}",
            raw_text=text,
        ) from e


class GeminiClient(BaseLLMClient):
    """Async client for the Google Gemini API."""

    def __init__(self, model: str | None = None, api_key: str | None = None):
        """Initialize Gemini client.

        Args:
            model: Model name override. Defaults to config value.
            api_key: API key override. Defaults to GOOGLE_API_KEY / GEMINI_API_KEY.

        Raises:
            ConfigError: If no API key is configured.
        """
        from google import genai

        settings = get_settings()

        key = api_key or settings.agents.effective_google_key
        if not key:
            raise ConfigError(
                "Gemini API key not found! "
                "Set GOOGLE_API_KEY (or GEMINI_API_KEY / API_KEY) and try again."
            )

        self._client = genai.Client(api_key=key)
        self._model = model or settings.agents.gemini_model

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, prompt: str, schema: dict[str, Any] | None = None) -> Any:
        """Generate content using Gemini.

        Every call carries the fixed system instruction that marks embedded
        repository text as inert data.

        Args:
            prompt: The user prompt.
            schema: Optional response schema (Gemini OpenAPI subset).

        Returns:
            Decoded JSON when ``schema`` is given, otherwise trimmed text.

        Raises:
            GenerationServiceFailure: If the API call fails or returns nothing.
            InvalidResponseFormat: If a schema call returns invalid JSON.
        """
        from google.genai import types

        config_kwargs: dict[str, Any] = {"system_instruction": SYSTEM_INSTRUCTION}
        if schema is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = schema
        config = types.GenerateContentConfig(**config_kwargs)

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            raise GenerationServiceFailure(f"Gemini API error: {e}") from e

        text = response.text
        if not text:
            raise GenerationServiceFailure("Gemini returned empty response")

        usage = getattr(response, "usage_metadata", None)
        if usage:
            logger.debug(
                f"Gemini usage: prompt={getattr(usage, 'prompt_token_count', None)} "
                f"completion={getattr(usage, 'candidates_token_count', None)}"
            )

        if schema is None:
            return text.strip()
        return parse_json_response(text)
