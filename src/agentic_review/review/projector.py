"""
Session state projector.

Folds the ordered WorkflowEvent stream into the Session aggregate. The reducer
is pure; SessionProjector holds the current state for a single writer.
"""

import logging

from agentic_review.models import (
    AgentStatus,
    LogStatus,
    ProcessLogEntry,
    ReviewStatus,
    Session,
    WorkflowEvent,
    WorkflowEventType,
)

logger = logging.getLogger(__name__)


def initial_session() -> Session:
    """Build an idle session with every agent reset to Idle."""
    return Session()


def reduce_event(session: Session, event: WorkflowEvent) -> Session:
    """
    Apply one event to a session.

    Cache and log ids are minted here, and only here, as the current length of
    the list they are appended to. LOG_UPDATE targets the last log entry and is
    a no-op on an empty log.

    Args:
        session: Current state (not modified)
        event: Event to apply

    Returns:
        New session state
    """
    kind = event.type

    if kind == WorkflowEventType.AGENT_STATUS:
        agents = [
            agent.model_copy(update={"status": event.agent_status, "task": event.task or ""})
            if agent.name == event.agent_name
            else agent
            for agent in session.agents
        ]
        return session.model_copy(update={"agents": agents})

    if kind == WorkflowEventType.KV_UPDATE:
        if event.entry is None:
            return session
        entry = event.entry.model_copy(update={"id": len(session.cache)})
        return session.model_copy(update={"cache": [*session.cache, entry]})

    if kind == WorkflowEventType.LOG:
        log = ProcessLogEntry(
            id=len(session.logs),
            message=event.message or "",
            status=event.log_status or LogStatus.PENDING,
        )
        return session.model_copy(update={"logs": [*session.logs, log]})

    if kind == WorkflowEventType.LOG_UPDATE:
        if not session.logs:
            return session
        update: dict[str, object] = {}
        if event.log_status is not None:
            update["status"] = event.log_status
        if event.message:
            update["message"] = event.message
        last = session.logs[-1].model_copy(update=update)
        return session.model_copy(update={"logs": [*session.logs[:-1], last]})

    if kind == WorkflowEventType.REPORT:
        return session.model_copy(update={"report": event.report})

    if kind == WorkflowEventType.ERROR:
        agents = [
            agent.model_copy(update={"status": AgentStatus.ERROR})
            if agent.status == AgentStatus.WORKING
            else agent
            for agent in session.agents
        ]
        return session.model_copy(update={"error": event.error, "agents": agents})

    if kind == WorkflowEventType.STATUS:
        if event.review_status is None:
            return session
        return session.model_copy(update={"status": event.review_status})

    logger.warning(f"Ignoring unknown workflow event type: {event.type}")
    return session


class SessionProjector:
    """Holds the live session and applies events to it."""

    def __init__(self, session: Session | None = None):
        self.session = session or initial_session()

    def apply(self, event: WorkflowEvent) -> Session:
        """Apply an event and return the new state."""
        self.session = reduce_event(self.session, event)
        return self.session

    def reset(self) -> Session:
        """Discard the current state."""
        self.session = initial_session()
        return self.session

    def start(self) -> Session:
        """Reset and mark the session as in progress."""
        self.session = initial_session().model_copy(
            update={"status": ReviewStatus.IN_PROGRESS}
        )
        return self.session

    async def __call__(self, event: WorkflowEvent) -> None:
        """Progress callback adapter for WorkflowOrchestrator.run."""
        self.apply(event)
