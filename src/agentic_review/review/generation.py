"""
Structured generation operations used by the review workflow.

Each operation pairs a prompt template with a response schema and validates
the decoded payload into the corresponding pydantic model.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from agentic_review.exceptions import InvalidResponseFormat
from agentic_review.llm.base import BaseLLMClient
from agentic_review.llm.prompts import (
    build_agent_task,
    build_architecture_prompt,
    build_final_summary_prompt,
    build_notes_prompt,
    build_report_prompt,
)
from agentic_review.llm.schemas import (
    AGENT_NOTES_SCHEMA,
    ARCHITECTURE_MAP_SCHEMA,
    REPORT_SCHEMAS,
)
from agentic_review.models import (
    AgentName,
    AgentReport,
    AgentReportResult,
    AnalysisCategory,
    ArchitectureMap,
    Note,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate(model: type[ModelT], data: Any, what: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidResponseFormat(
            f"Could not generate a valid {what}: {e.error_count()} validation error(s)",
            raw_text=str(data),
        ) from e


class ReviewGenerator:
    """
    Prompt + schema pairings over a structured generation client.

    The client is created lazily so that a generator can be built before the
    Gemini key is checked (e.g. in tests that inject a mock client).
    """

    def __init__(self, client: BaseLLMClient | None = None):
        self._client = client

    @property
    def client(self) -> BaseLLMClient:
        if self._client is None:
            from agentic_review.llm.gemini import GeminiClient

            self._client = GeminiClient()
        return self._client

    async def generate_architecture_map(self, context: str) -> ArchitectureMap:
        """Generate the architecture map of a codebase."""
        data = await self.client.generate(
            build_architecture_prompt(context), schema=ARCHITECTURE_MAP_SCHEMA
        )
        architecture_map = _validate(ArchitectureMap, data, "architecture map")
        logger.info(f"Architecture map created ({len(architecture_map.files)} files)")
        return architecture_map

    async def generate_agent_notes(
        self,
        agent: AgentName,
        context: str,
        architecture_map: ArchitectureMap,
    ) -> list[Note]:
        """
        Generate the raw notes of a specialist.

        Raises:
            UnknownAgentRole: If the agent has no task template.
        """
        # Fails before any network call for roles without a template
        build_agent_task(agent)

        prompt = build_notes_prompt(
            agent, context, architecture_map.model_dump(by_alias=True, mode="json")
        )
        data = await self.client.generate(prompt, schema=AGENT_NOTES_SCHEMA)
        if not isinstance(data, dict) or not isinstance(data.get("notes"), list):
            raise InvalidResponseFormat(
                f"Could not generate valid notes for {agent.value}: missing 'notes' array",
                raw_text=str(data),
            )

        notes = [_validate(Note, item, f"note for {agent.value}") for item in data["notes"]]
        logger.info(f"{agent.value} took {len(notes)} notes")
        return notes

    async def generate_agent_report(
        self,
        agent: AgentName,
        category: AnalysisCategory,
        notes: list[Note],
    ) -> AgentReport:
        """
        Consolidate a specialist's notes into a report.

        The response schema only accepts ``category`` for findings; a report
        that still carries another category is rejected.

        Raises:
            InvalidResponseFormat: If the report is malformed or mixes categories.
        """
        prompt = build_report_prompt(
            agent, category, [note.model_dump(by_alias=True, mode="json") for note in notes]
        )
        data = await self.client.generate(prompt, schema=REPORT_SCHEMAS[category])
        report = _validate(AgentReport, data, f"report for {agent.value}")

        foreign = report.categories() - {category}
        if foreign:
            raise InvalidResponseFormat(
                f"Report for {agent.value} contains findings outside '{category.value}': "
                f"{', '.join(sorted(c.value for c in foreign))}",
                raw_text=str(data),
            )
        return report

    async def generate_final_summary(self, agent_reports: list[AgentReportResult]) -> str:
        """Synthesize the executive summary from all specialist reports."""
        payload = [result.model_dump(by_alias=True, mode="json") for result in agent_reports]
        summary = await self.client.generate(build_final_summary_prompt(payload))
        return str(summary).strip()
