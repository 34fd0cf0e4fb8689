"""Base LLM client interface."""

from abc import ABC, abstractmethod
from typing import Any


class BaseLLMClient(ABC):
    """Abstract base class for structured-generation LLM clients."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Client name identifier."""
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier."""
        ...

    @abstractmethod
    async def generate(self, prompt: str, schema: dict[str, Any] | None = None) -> Any:
        """Generate a response from prompt.

        Args:
            prompt: User prompt.
            schema: Optional response schema. When given, the response is
                JSON constrained to this schema and returned decoded.

        Returns:
            Decoded JSON value when ``schema`` is set, trimmed text otherwise.
        """
        ...
