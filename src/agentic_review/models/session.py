"""
Models for the live review session: cache entries, process log, report and session state.
"""

import time
from enum import Enum
from typing import Annotated, Literal

from pydantic import Field

from agentic_review.models.agents import Agent, AgentName, AgentStatus, default_agents
from agentic_review.models.findings import (
    AgentReport,
    AgentReportResult,
    ArchitectureMap,
    CamelModel,
    Note,
)


class ReviewStatus(str, Enum):
    """Session lifecycle: idle -> in_progress -> completed | error."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ERROR = "error"


class ReportStatus(str, Enum):
    """Final report status."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ERROR = "error"


class LogStatus(str, Enum):
    """Process log entry status."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class CacheEntryType(str, Enum):
    """Kinds of inter-agent communication recorded in the cache."""

    ARCHITECTURE_MAP = "ARCHITECTURE_MAP"
    NOTE = "NOTE"
    AGENT_REPORT = "AGENT_REPORT"


class ArchitectureMapEntry(CamelModel):
    """Cache entry holding the architecture map."""

    type: Literal["ARCHITECTURE_MAP"] = "ARCHITECTURE_MAP"
    id: int | None = Field(default=None, description="Sequence id minted by the projector")
    agent_name: AgentName
    payload: ArchitectureMap


class NoteEntry(CamelModel):
    """Cache entry holding one specialist note."""

    type: Literal["NOTE"] = "NOTE"
    id: int | None = None
    agent_name: AgentName
    payload: Note


class AgentReportEntry(CamelModel):
    """Cache entry holding one specialist report."""

    type: Literal["AGENT_REPORT"] = "AGENT_REPORT"
    id: int | None = None
    agent_name: AgentName
    payload: AgentReport


CacheEntry = Annotated[
    ArchitectureMapEntry | NoteEntry | AgentReportEntry,
    Field(discriminator="type"),
]


class ProcessLogEntry(CamelModel):
    """A line of the process log. Only the last entry is ever updated in place."""

    id: int
    message: str
    status: LogStatus


class ReportBody(CamelModel):
    """Synthesized summary plus per-agent reports in the fixed role order."""

    summary: str
    agent_reports: list[AgentReportResult] = Field(default_factory=list)


class Report(CamelModel):
    """Final review report."""

    review_id: str = Field(..., alias="review_id")
    status: ReportStatus = ReportStatus.COMPLETED
    report: ReportBody

    @staticmethod
    def new_review_id() -> str:
        """Derive a review id from the current time."""
        return f"rev_{int(time.time() * 1000)}"

    @property
    def total_findings(self) -> int:
        return sum(len(r.report.findings) for r in self.report.agent_reports)


class Session(CamelModel):
    """Aggregate root of the single live review."""

    status: ReviewStatus = ReviewStatus.IDLE
    agents: list[Agent] = Field(default_factory=default_agents)
    cache: list[CacheEntry] = Field(default_factory=list)
    logs: list[ProcessLogEntry] = Field(default_factory=list)
    report: Report | None = None
    error: str | None = None

    def get_agent(self, name: AgentName) -> Agent:
        """Get an agent by name."""
        for agent in self.agents:
            if agent.name == name:
                return agent
        raise KeyError(name)

    def working_agents(self) -> list[Agent]:
        """Get agents currently working."""
        return [a for a in self.agents if a.status == AgentStatus.WORKING]
