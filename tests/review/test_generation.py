"""
Tests for ReviewGenerator prompt/schema pairings.

Run with: uv run pytest tests/review/test_generation.py -v
"""

from typing import Any

import pytest

from agentic_review.exceptions import InvalidResponseFormat, UnknownAgentRole
from agentic_review.llm.base import BaseLLMClient
from agentic_review.llm.schemas import AGENT_NOTES_SCHEMA, ARCHITECTURE_MAP_SCHEMA, REPORT_SCHEMAS
from agentic_review.models import (
    AgentName,
    AgentReportResult,
    AnalysisCategory,
    Severity,
)
from agentic_review.review.generation import ReviewGenerator


class ScriptedClient(BaseLLMClient):
    """LLM client returning scripted responses and recording calls."""

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    @property
    def name(self) -> str:
        return "scripted"

    @property
    def model(self) -> str:
        return "scripted-1"

    async def generate(self, prompt: str, schema: dict[str, Any] | None = None) -> Any:
        self.calls.append((prompt, schema))
        return self.responses.pop(0)


def _finding(category: str) -> dict[str, Any]:
    return {
        "category": category,
        "title": "Hardcoded secret",
        "description": "An API key is committed in config.ts.",
        "severity": "Critical",
        "suggestion": "Load secrets from the environment.",
        "codeSpecificSuggestion": {
            "filePath": "src/config.ts",
            "functionName": "loadConfig",
            "lineStart": 3,
            "lineEnd": 5,
            "suggestion": "const key = process.env.API_KEY;",
        },
    }


class TestArchitectureMap:
    """Tests for generate_architecture_map."""

    @pytest.mark.asyncio
    async def test_returns_validated_map(self, sample_context):
        client = ScriptedClient(
            {
                "summary": "Small app.",
                "files": [{"path": "src/app.ts", "description": "Entry.", "components": ["add"]}],
            }
        )

        result = await ReviewGenerator(client).generate_architecture_map(sample_context)

        assert result.summary == "Small app."
        assert result.files[0].components == ["add"]
        prompt, schema = client.calls[0]
        assert schema is ARCHITECTURE_MAP_SCHEMA
        assert "<<<BEGIN CODEBASE>>>" in prompt

    @pytest.mark.asyncio
    async def test_malformed_payload(self, sample_context):
        client = ScriptedClient({"files": "nope"})

        with pytest.raises(InvalidResponseFormat):
            await ReviewGenerator(client).generate_architecture_map(sample_context)


class TestAgentNotes:
    """Tests for generate_agent_notes."""

    @pytest.mark.asyncio
    async def test_returns_notes(self, sample_context, sample_architecture_map):
        client = ScriptedClient(
            {"notes": [{"filePath": "src/app.ts", "finding": "No input checks", "severity": "Low"}]}
        )

        notes = await ReviewGenerator(client).generate_agent_notes(
            AgentName.SECURITY_SENTINEL, sample_context, sample_architecture_map
        )

        assert len(notes) == 1
        assert notes[0].file_path == "src/app.ts"
        assert notes[0].severity == Severity.LOW
        prompt, schema = client.calls[0]
        assert schema is AGENT_NOTES_SCHEMA
        assert "A tiny TypeScript utility package." in prompt

    @pytest.mark.asyncio
    async def test_unknown_role_fails_before_calling_model(
        self, sample_context, sample_architecture_map
    ):
        client = ScriptedClient()

        with pytest.raises(UnknownAgentRole):
            await ReviewGenerator(client).generate_agent_notes(
                AgentName.EDITING_AGENT, sample_context, sample_architecture_map
            )

        assert client.calls == []

    @pytest.mark.asyncio
    async def test_missing_notes_array(self, sample_context, sample_architecture_map):
        client = ScriptedClient({"observations": []})

        with pytest.raises(InvalidResponseFormat):
            await ReviewGenerator(client).generate_agent_notes(
                AgentName.SECURITY_SENTINEL, sample_context, sample_architecture_map
            )


class TestAgentReport:
    """Tests for generate_agent_report."""

    @pytest.mark.asyncio
    async def test_uses_category_schema(self, make_note):
        client = ScriptedClient({"summary": "One issue.", "findings": [_finding("Security")]})
        notes = [make_note(AgentName.SECURITY_SENTINEL)]

        report = await ReviewGenerator(client).generate_agent_report(
            AgentName.SECURITY_SENTINEL, AnalysisCategory.SECURITY, notes
        )

        assert report.categories() == {AnalysisCategory.SECURITY}
        assert report.findings[0].code_specific_suggestion.line_end == 5
        _, schema = client.calls[0]
        assert schema is REPORT_SCHEMAS[AnalysisCategory.SECURITY]

    @pytest.mark.asyncio
    async def test_rejects_foreign_category(self, make_note):
        client = ScriptedClient(
            {"summary": "Mixed.", "findings": [_finding("Security"), _finding("Efficiency")]}
        )

        with pytest.raises(InvalidResponseFormat, match="Efficiency"):
            await ReviewGenerator(client).generate_agent_report(
                AgentName.SECURITY_SENTINEL,
                AnalysisCategory.SECURITY,
                [make_note(AgentName.SECURITY_SENTINEL)],
            )

    @pytest.mark.asyncio
    async def test_empty_findings_allowed(self):
        client = ScriptedClient({"summary": "Nothing found.", "findings": []})

        report = await ReviewGenerator(client).generate_agent_report(
            AgentName.UI_UX_ANALYST, AnalysisCategory.UI_UX, []
        )

        assert report.findings == []


class TestFinalSummary:
    """Tests for generate_final_summary."""

    @pytest.mark.asyncio
    async def test_schema_less_and_trimmed(self, make_agent_report):
        client = ScriptedClient("  The codebase is healthy overall.  ")
        reports = [
            AgentReportResult(
                agent_name=AgentName.SECURITY_SENTINEL,
                report=make_agent_report(AnalysisCategory.SECURITY),
            )
        ]

        summary = await ReviewGenerator(client).generate_final_summary(reports)

        assert summary == "The codebase is healthy overall."
        prompt, schema = client.calls[0]
        assert schema is None
        assert "Security Sentinel" in prompt
