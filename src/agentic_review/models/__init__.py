"""
Pydantic models for Agentic Review sessions, artifacts and events.
"""

from agentic_review.models.agents import (
    AGENT_CONFIGS,
    Agent,
    AgentConfig,
    AgentName,
    AgentStatus,
    AnalysisCategory,
    default_agents,
    get_specialists,
)
from agentic_review.models.events import WorkflowEvent, WorkflowEventType
from agentic_review.models.findings import (
    AgentReport,
    AgentReportResult,
    ArchitectureFile,
    ArchitectureMap,
    CodeSpecificSuggestion,
    Finding,
    Note,
    Severity,
)
from agentic_review.models.session import (
    AgentReportEntry,
    ArchitectureMapEntry,
    CacheEntry,
    CacheEntryType,
    LogStatus,
    NoteEntry,
    ProcessLogEntry,
    Report,
    ReportBody,
    ReportStatus,
    ReviewStatus,
    Session,
)

__all__ = [
    # Agents
    "AGENT_CONFIGS",
    "Agent",
    "AgentConfig",
    "AgentName",
    "AgentStatus",
    "AnalysisCategory",
    "default_agents",
    "get_specialists",
    # Artifacts
    "AgentReport",
    "AgentReportResult",
    "ArchitectureFile",
    "ArchitectureMap",
    "CodeSpecificSuggestion",
    "Finding",
    "Note",
    "Severity",
    # Session
    "AgentReportEntry",
    "ArchitectureMapEntry",
    "CacheEntry",
    "CacheEntryType",
    "LogStatus",
    "NoteEntry",
    "ProcessLogEntry",
    "Report",
    "ReportBody",
    "ReportStatus",
    "ReviewStatus",
    "Session",
    # Events
    "WorkflowEvent",
    "WorkflowEventType",
]
