"""
Pytest configuration and shared fixtures for Agentic Review tests.
"""

import pytest

from agentic_review.config import WorkflowSettings, reset_settings
from agentic_review.integrations.github import FetchResult, build_context
from agentic_review.models import (
    AgentName,
    AgentReport,
    AnalysisCategory,
    ArchitectureFile,
    ArchitectureMap,
    CodeSpecificSuggestion,
    Finding,
    Note,
    Severity,
)

CREDENTIAL_ENV_VARS = ("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY", "GITHUB_TOKEN")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against a known environment and fresh settings."""
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GOOGLE_API_KEY", "test-google-key")
    monkeypatch.setenv("AGENTIC_REVIEW_WORKFLOW_SHORT_DELAY", "0")
    monkeypatch.setenv("AGENTIC_REVIEW_WORKFLOW_MEDIUM_DELAY", "0")
    monkeypatch.setenv("AGENTIC_REVIEW_WORKFLOW_LONG_DELAY", "0")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fast_workflow_settings():
    """Workflow settings without pacing delays."""
    return WorkflowSettings(short_delay=0, medium_delay=0, long_delay=0, enable_cicd=True)


@pytest.fixture
def sample_context():
    """Two-file codebase context."""
    return build_context(
        [
            ("package.json", '{"name": "widgets", "dependencies": {"react": "^18.0.0"}}'),
            ("src/app.ts", "export const add = (a: number, b: number) => a + b;\n"),
        ]
    )


@pytest.fixture
def sample_fetch_result(sample_context):
    """Fetch result wrapping the two-file context."""
    return FetchResult(
        context=sample_context,
        files_included=["package.json", "src/app.ts"],
    )


@pytest.fixture
def sample_architecture_map():
    """Small architecture map."""
    return ArchitectureMap(
        summary="A tiny TypeScript utility package.",
        files=[
            ArchitectureFile(
                path="src/app.ts",
                description="Exports arithmetic helpers.",
                components=["add"],
            ),
            ArchitectureFile(
                path="package.json",
                description="Package manifest.",
                components=[],
            ),
        ],
    )


@pytest.fixture
def make_note():
    """Factory for notes."""

    def _make(agent: AgentName, severity: Severity = Severity.MEDIUM) -> Note:
        return Note(
            file_path="src/app.ts",
            finding=f"{agent.value} observation about add()",
            severity=severity,
        )

    return _make


@pytest.fixture
def make_agent_report():
    """Factory for single-finding agent reports."""

    def _make(category: AnalysisCategory, findings: int = 1) -> AgentReport:
        return AgentReport(
            summary=f"{category.value} looks mostly fine.",
            findings=[
                Finding(
                    category=category,
                    title=f"{category.value} issue {i + 1}",
                    description="The add helper does not validate its inputs.",
                    severity=Severity.HIGH,
                    suggestion="Validate inputs before use.\nDocument the contract.",
                    code_specific_suggestion=CodeSpecificSuggestion(
                        file_path="src/app.ts",
                        function_name="add",
                        line_start=1,
                        line_end=1,
                        suggestion="if (!Number.isFinite(a)) throw new Error('a');\nreturn a + b;",
                    ),
                )
                for i in range(findings)
            ],
        )

    return _make
