"""Workflow events streamed from the orchestrator to the session projector."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from agentic_review.models.agents import AgentName, AgentStatus
from agentic_review.models.session import CacheEntry, LogStatus, Report, ReviewStatus


class WorkflowEventType(str, Enum):
    """Types of workflow events."""

    AGENT_STATUS = "AGENT_STATUS"
    KV_UPDATE = "KV_UPDATE"
    LOG = "LOG"
    LOG_UPDATE = "LOG_UPDATE"
    REPORT = "REPORT"
    ERROR = "ERROR"
    STATUS = "STATUS"


class WorkflowEvent(BaseModel):
    """Progress event emitted by the workflow orchestrator.

    Only the fields relevant to ``type`` are set; use the factory
    classmethods to build well-formed events.
    """

    type: WorkflowEventType = Field(..., description="Event type")
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    # AGENT_STATUS
    agent_name: AgentName | None = Field(default=None, description="Agent whose status changed")
    agent_status: AgentStatus | None = Field(default=None)
    task: str | None = Field(default=None, description="Current task label")

    # KV_UPDATE
    entry: CacheEntry | None = Field(default=None, description="Cache entry (id unset)")

    # LOG / LOG_UPDATE
    message: str | None = Field(default=None, description="Log message")
    log_status: LogStatus | None = Field(default=None)

    # REPORT
    report: Report | None = Field(default=None)

    # ERROR
    error: str | None = Field(default=None, description="User-facing error message")

    # STATUS
    review_status: ReviewStatus | None = Field(default=None)

    @classmethod
    def agent(cls, name: AgentName, status: AgentStatus, task: str | None = None) -> "WorkflowEvent":
        return cls(
            type=WorkflowEventType.AGENT_STATUS, agent_name=name, agent_status=status, task=task
        )

    @classmethod
    def kv_update(cls, entry: CacheEntry) -> "WorkflowEvent":
        return cls(type=WorkflowEventType.KV_UPDATE, entry=entry)

    @classmethod
    def log(cls, message: str, status: LogStatus = LogStatus.PENDING) -> "WorkflowEvent":
        return cls(type=WorkflowEventType.LOG, message=message, log_status=status)

    @classmethod
    def log_update(cls, status: LogStatus, message: str | None = None) -> "WorkflowEvent":
        return cls(type=WorkflowEventType.LOG_UPDATE, message=message, log_status=status)

    @classmethod
    def report_ready(cls, report: Report) -> "WorkflowEvent":
        return cls(type=WorkflowEventType.REPORT, report=report)

    @classmethod
    def failure(cls, error: str) -> "WorkflowEvent":
        return cls(type=WorkflowEventType.ERROR, error=error)

    @classmethod
    def status(cls, status: ReviewStatus) -> "WorkflowEvent":
        return cls(type=WorkflowEventType.STATUS, review_status=status)

    def to_sse(self) -> dict[str, str]:
        """Convert to SSE format."""
        return {
            "event": self.type.value,
            "data": self.model_dump_json(exclude_none=True, by_alias=True),
        }
