"""Review session routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from sse_starlette.sse import EventSourceResponse

from ...config import get_settings
from ...exceptions import InvalidRepoUrl
from ...integrations.github import parse_repo_url
from ...review.orchestrator import ReviewRequest
from ...review.report_generator import ReportGenerator
from ..session_manager import ReviewSessionManager, get_session_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/review", tags=["review"])


class StartReviewBody(BaseModel):
    """Request body for starting a review."""

    repo_url: str = Field(..., min_length=1, description="GitHub repository URL")
    branch: str = Field(default="main", min_length=1, description="Branch to review")
    enable_cicd: bool | None = Field(
        default=None, description="Simulate CI/CD steps (defaults to configuration)"
    )


def _session_payload(manager: ReviewSessionManager) -> dict[str, Any]:
    return manager.session.model_dump(by_alias=True, mode="json")


@router.post("", status_code=202)
async def start_review(
    body: StartReviewBody,
    manager: ReviewSessionManager = Depends(get_session_manager),
) -> dict[str, Any]:
    """Start a review, replacing the current session."""
    try:
        parse_repo_url(body.repo_url)
    except InvalidRepoUrl as e:
        logger.warning(f"Rejected review request for {body.repo_url!r}: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    enable_cicd = body.enable_cicd
    if enable_cicd is None:
        enable_cicd = get_settings().workflow.enable_cicd

    request = ReviewRequest(
        repo_url=body.repo_url.strip(),
        branch=body.branch.strip(),
        enable_cicd=enable_cicd,
    )
    await manager.start(request)
    return _session_payload(manager)


@router.get("")
def get_review(
    manager: ReviewSessionManager = Depends(get_session_manager),
) -> dict[str, Any]:
    """Get the current session state."""
    return _session_payload(manager)


@router.get("/events")
async def stream_review_events(
    manager: ReviewSessionManager = Depends(get_session_manager),
):
    """
    Stream workflow events via SSE.

    Replays the event history, then streams live events until the review
    finishes.
    """
    return EventSourceResponse(manager.stream_events())


@router.post("/reset")
async def reset_review(
    manager: ReviewSessionManager = Depends(get_session_manager),
) -> dict[str, Any]:
    """Cancel any running review and clear the session."""
    await manager.reset()
    return _session_payload(manager)


@router.get("/report.md", response_class=PlainTextResponse)
def download_report(
    manager: ReviewSessionManager = Depends(get_session_manager),
) -> PlainTextResponse:
    """Download the final report as Markdown."""
    report = manager.session.report
    if report is None:
        raise HTTPException(status_code=404, detail="No report available")

    filename = ReportGenerator.report_filename(report)
    return PlainTextResponse(
        ReportGenerator.to_markdown(report),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
