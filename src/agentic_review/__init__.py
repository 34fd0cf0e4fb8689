"""Agentic Review - Multi-agent AI code review for GitHub repositories."""

__version__ = "0.1.0"

# LLM clients
from agentic_review.llm import BaseLLMClient, GeminiClient

# Review workflow
from agentic_review.review import (
    ReportGenerator,
    ReviewGenerator,
    ReviewRequest,
    SessionProjector,
    WorkflowOrchestrator,
)

__all__ = [
    # Version
    "__version__",
    # LLM
    "BaseLLMClient",
    "GeminiClient",
    # Review
    "ReportGenerator",
    "ReviewGenerator",
    "ReviewRequest",
    "SessionProjector",
    "WorkflowOrchestrator",
]
