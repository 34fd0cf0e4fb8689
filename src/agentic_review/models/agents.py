"""
Agent roster: names, statuses, categories and the static per-agent configuration.
"""

from enum import Enum

from pydantic import BaseModel, Field


class AgentName(str, Enum):
    """Agents taking part in a review, in display order."""

    SUPERVISOR = "Supervisor"
    ARCHITECTURE_ANALYST = "Architecture Analyst"
    SECURITY_SENTINEL = "Security Sentinel"
    EFFICIENCY_EXPERT = "Efficiency Expert"
    MAINTAINABILITY_MAESTRO = "Maintainability Maestro"
    DEPENDENCY_DETECTIVE = "Dependency Detective"
    UI_UX_ANALYST = "UI/UX Analyst"
    DRAFTING_AGENT = "Drafting Agent"
    EDITING_AGENT = "Editing Agent"
    REVISING_AGENT = "Revising Agent"


class AgentStatus(str, Enum):
    """Agent lifecycle states."""

    IDLE = "Idle"
    WORKING = "Working"
    COMPLETED = "Completed"
    ERROR = "Error"


class AnalysisCategory(str, Enum):
    """Finding categories, one per specialist agent."""

    ARCHITECTURE = "Architecture"
    SECURITY = "Security"
    EFFICIENCY = "Efficiency"
    MAINTAINABILITY = "Maintainability"
    DEPENDENCY = "Dependency"
    UI_UX = "UI/UX"


class Agent(BaseModel):
    """Live state of a single agent."""

    name: AgentName
    role: str
    status: AgentStatus = AgentStatus.IDLE
    task: str = Field(default="", description="Current task label")


class AgentConfig(BaseModel):
    """Static configuration of an agent."""

    role: str
    category: AnalysisCategory | None = None
    task_template: str | None = Field(
        default=None, description="What a specialist looks for when taking notes"
    )

    @property
    def is_specialist(self) -> bool:
        return self.category is not None


AGENT_CONFIGS: dict[AgentName, AgentConfig] = {
    AgentName.SUPERVISOR: AgentConfig(role="Orchestrates the review process."),
    AgentName.ARCHITECTURE_ANALYST: AgentConfig(
        role="Analyzes code structure and design patterns.",
        category=AnalysisCategory.ARCHITECTURE,
        task_template=(
            "You've already created an architectural map. Now, perform a deeper analysis. "
            "Identify specific architectural weaknesses (e.g., tight coupling, god objects, "
            "misplaced responsibilities)."
        ),
    ),
    AgentName.SECURITY_SENTINEL: AgentConfig(
        role="Scans for security vulnerabilities.",
        category=AnalysisCategory.SECURITY,
        task_template=(
            "Identify all potential security vulnerabilities (e.g., XSS, SQL Injection, "
            "hardcoded secrets, insecure dependencies)."
        ),
    ),
    AgentName.EFFICIENCY_EXPERT: AgentConfig(
        role="Identifies performance bottlenecks.",
        category=AnalysisCategory.EFFICIENCY,
        task_template=(
            "Identify potential performance bottlenecks (e.g., N+1 queries, unnecessary "
            "re-renders). IMPORTANT: You must carefully evaluate if a proposed optimization "
            "preserves the original algorithm's logic. If a high-complexity algorithm is "
            "necessary for correctness, do NOT suggest a simplified version that breaks "
            "functionality; instead, note it as 'Necessary High Compute' and do not count it "
            "as a negative finding. Avoid suggestions that compromise the intended logic."
        ),
    ),
    AgentName.MAINTAINABILITY_MAESTRO: AgentConfig(
        role="Evaluates code readability and clarity.",
        category=AnalysisCategory.MAINTAINABILITY,
        task_template=(
            "Identify all potential maintainability issues (e.g., code duplication, high "
            "complexity, lack of comments, magic numbers)."
        ),
    ),
    AgentName.DEPENDENCY_DETECTIVE: AgentConfig(
        role="Checks for outdated or vulnerable dependencies.",
        category=AnalysisCategory.DEPENDENCY,
        task_template=(
            "Analyze the dependency files (like package.json) and codebase. Identify all "
            "dependency-related issues (e.g., outdated packages, unused dependencies, packages "
            "with known vulnerabilities)."
        ),
    ),
    AgentName.UI_UX_ANALYST: AgentConfig(
        role="Evaluates interface design, responsiveness, and structure.",
        category=AnalysisCategory.UI_UX,
        task_template=(
            "Analyze the codebase for UI/UX best practices. Identify issues such as hardcoded "
            "styles, lack of responsiveness, improper HTML semantic structure (e.g., overuse of "
            "divs), accessibility gaps (missing ARIA), and layout containment issues."
        ),
    ),
    AgentName.DRAFTING_AGENT: AgentConfig(role="Collates findings and drafts the report."),
    AgentName.EDITING_AGENT: AgentConfig(role="Reviews the draft for clarity and correctness."),
    AgentName.REVISING_AGENT: AgentConfig(role="Refines the report for a polished output."),
}


def get_specialists() -> list[tuple[AgentName, AnalysisCategory]]:
    """Get specialist agents with their category, in the fixed role order."""
    return [
        (name, config.category)
        for name, config in AGENT_CONFIGS.items()
        if config.is_specialist
    ]


def default_agents() -> list[Agent]:
    """Build the idle roster used at session start."""
    return [Agent(name=name, role=config.role) for name, config in AGENT_CONFIGS.items()]
