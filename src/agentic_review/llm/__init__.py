"""Agentic Review LLM clients."""

from .base import BaseLLMClient
from .gemini import GeminiClient, parse_json_response
from .prompts import SYSTEM_INSTRUCTION, wrap_untrusted
from .schemas import (
    AGENT_NOTES_SCHEMA,
    ARCHITECTURE_MAP_SCHEMA,
    REPORT_SCHEMAS,
    get_report_schema,
)

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "parse_json_response",
    "SYSTEM_INSTRUCTION",
    "wrap_untrusted",
    "AGENT_NOTES_SCHEMA",
    "ARCHITECTURE_MAP_SCHEMA",
    "REPORT_SCHEMAS",
    "get_report_schema",
]
