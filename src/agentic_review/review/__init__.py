"""
Agentic Review workflow: generation, orchestration, projection and reporting.
"""

from agentic_review.review.generation import ReviewGenerator
from agentic_review.review.orchestrator import (
    ProgressCallback,
    ReviewRequest,
    WorkflowOrchestrator,
)
from agentic_review.review.projector import SessionProjector, initial_session, reduce_event
from agentic_review.review.report_generator import ParsedReport, ReportGenerator

__all__ = [
    "ReviewGenerator",
    "ProgressCallback",
    "ReviewRequest",
    "WorkflowOrchestrator",
    "SessionProjector",
    "initial_session",
    "reduce_event",
    "ParsedReport",
    "ReportGenerator",
]
