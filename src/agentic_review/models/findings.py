"""
Models for generated review artifacts: architecture map, notes, findings and reports.

JSON field names follow the camelCase shape requested from the model; Python
attributes are snake_case.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from agentic_review.models.agents import AgentName, AnalysisCategory


class Severity(str, Enum):
    """Finding and note severity levels."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArchitectureFile(CamelModel):
    """A significant file in the architecture map."""

    path: str
    description: str = Field(..., description="One-sentence description of the file's purpose")
    components: list[str] = Field(default_factory=list, description="Key classes or functions")


class ArchitectureMap(CamelModel):
    """One-time summary of repository structure shared by all specialists."""

    summary: str
    files: list[ArchitectureFile] = Field(default_factory=list)


class Note(CamelModel):
    """A raw observation made by a specialist before its report is compiled."""

    file_path: str
    finding: str
    severity: Severity


class CodeSpecificSuggestion(CamelModel):
    """Concrete, located fix for a finding."""

    file_path: str
    function_name: str
    line_start: int
    line_end: int
    suggestion: str


class Finding(CamelModel):
    """A structured issue inside an agent report."""

    category: AnalysisCategory
    title: str
    description: str
    severity: Severity
    suggestion: str = Field(..., description="High-level, code-agnostic suggestion")
    code_specific_suggestion: CodeSpecificSuggestion


class AgentReport(CamelModel):
    """Consolidated report of one specialist."""

    summary: str
    findings: list[Finding] = Field(default_factory=list)

    def categories(self) -> set[AnalysisCategory]:
        """Get the distinct categories used by the findings."""
        return {finding.category for finding in self.findings}


class AgentReportResult(CamelModel):
    """An agent report paired with the agent that wrote it."""

    agent_name: AgentName
    report: AgentReport
