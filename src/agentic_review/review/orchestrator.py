"""
Workflow orchestrator for the Agentic Review multi-agent code review.

Drives the review state machine (idle -> in_progress -> completed | error) and
reports every step as a WorkflowEvent through an async progress callback.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, Field

from agentic_review.config import WorkflowSettings, get_settings
from agentic_review.exceptions import AgenticReviewError, UnknownWorkflowFailure
from agentic_review.integrations.github import GitHubContentFetcher
from agentic_review.models import (
    AgentName,
    AgentReportEntry,
    AgentReportResult,
    AgentStatus,
    AnalysisCategory,
    ArchitectureMap,
    ArchitectureMapEntry,
    LogStatus,
    NoteEntry,
    Report,
    ReportBody,
    ReportStatus,
    ReviewStatus,
    WorkflowEvent,
    get_specialists,
)
from agentic_review.review.generation import ReviewGenerator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[WorkflowEvent], Awaitable[None]]

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class ReviewRequest(BaseModel):
    """Input of a review run."""

    repo_url: str = Field(..., min_length=1, description="GitHub repository URL")
    branch: str = Field(default="main", min_length=1, description="Branch to review")
    enable_cicd: bool = Field(default=True, description="Simulate CI/CD status and PR posts")


class WorkflowOrchestrator:
    """
    Runs one complete review.

    Steps:
    1. Supervisor fetches the codebase
    2. Architecture Analyst builds the architecture map
    3. Specialists take notes and compile reports concurrently
    4. Drafting and Editing agents pace the write-up
    5. Revising Agent synthesizes the final summary and the report is emitted
    6. Optional CI/CD simulation
    """

    def __init__(
        self,
        fetcher: GitHubContentFetcher | None = None,
        generator: ReviewGenerator | None = None,
        settings: WorkflowSettings | None = None,
    ):
        self.fetcher = fetcher or GitHubContentFetcher()
        self.generator = generator or ReviewGenerator()
        self.settings = settings or get_settings().workflow

    async def run(
        self,
        request: ReviewRequest,
        progress_callback: ProgressCallback | None = None,
    ) -> Report | None:
        """Run the review workflow.

        Failures are reported through events and never raised; cancellation
        propagates to the caller without any error events.

        Args:
            request: Repository URL, branch and CI/CD toggle
            progress_callback: Optional async callback receiving every event

        Returns:
            The final Report, or None if the review failed
        """

        async def emit(event: WorkflowEvent) -> None:
            if progress_callback:
                await progress_callback(event)

        logger.info(f"Starting review of {request.repo_url} (branch: {request.branch})")
        await emit(WorkflowEvent.status(ReviewStatus.IN_PROGRESS))

        try:
            return await self._run_steps(request, emit)
        except asyncio.CancelledError:
            logger.info(f"Review of {request.repo_url} cancelled")
            raise
        except Exception as e:
            if isinstance(e, AgenticReviewError):
                error = e
            else:
                logger.exception(f"Unexpected failure during review of {request.repo_url}")
                error = UnknownWorkflowFailure(str(e) or UNKNOWN_ERROR_MESSAGE)

            message = str(error) or UNKNOWN_ERROR_MESSAGE
            logger.error(f"Review failed: {message}")

            await emit(WorkflowEvent.failure(f"Review failed: {message}"))
            await emit(WorkflowEvent.log_update(LogStatus.ERROR, f"Error: {message}"))
            await emit(WorkflowEvent.status(ReviewStatus.ERROR))
            return None

    async def _run_steps(
        self,
        request: ReviewRequest,
        emit: Callable[[WorkflowEvent], Awaitable[None]],
    ) -> Report:
        # 1. Supervisor fetches the codebase
        await emit(
            WorkflowEvent.agent(AgentName.SUPERVISOR, AgentStatus.WORKING, "Fetching codebase...")
        )
        await emit(
            WorkflowEvent.log(
                f"Fetching codebase from {request.repo_url} (branch: {request.branch})..."
            )
        )
        fetch = await self.fetcher.fetch_with_details(request.repo_url, request.branch)
        if fetch.truncated:
            fetched_message = (
                "Successfully fetched codebase "
                "(tree truncated by GitHub; analysis may be incomplete)."
            )
        else:
            fetched_message = "Successfully fetched codebase."
        await emit(WorkflowEvent.log_update(LogStatus.SUCCESS, fetched_message))
        await emit(WorkflowEvent.agent(AgentName.SUPERVISOR, AgentStatus.COMPLETED))
        context = fetch.context

        # 2. Architecture map
        await emit(
            WorkflowEvent.agent(
                AgentName.ARCHITECTURE_ANALYST, AgentStatus.WORKING, "Creating architecture map..."
            )
        )
        architecture_map = await self.generator.generate_architecture_map(context)
        await emit(
            WorkflowEvent.kv_update(
                ArchitectureMapEntry(
                    agent_name=AgentName.ARCHITECTURE_ANALYST, payload=architecture_map
                )
            )
        )
        await emit(
            WorkflowEvent.agent(
                AgentName.ARCHITECTURE_ANALYST, AgentStatus.WORKING, "Map created. Analyzing..."
            )
        )

        # 3-4. Specialists in parallel, joined
        agent_reports = await self._run_specialists(context, architecture_map, emit)

        # 5. Write-up
        await emit(
            WorkflowEvent.agent(AgentName.DRAFTING_AGENT, AgentStatus.WORKING, "Collating reports...")
        )
        await asyncio.sleep(self.settings.medium_delay)
        await emit(WorkflowEvent.agent(AgentName.DRAFTING_AGENT, AgentStatus.COMPLETED))

        await emit(
            WorkflowEvent.agent(AgentName.EDITING_AGENT, AgentStatus.WORKING, "Reviewing draft...")
        )
        await asyncio.sleep(self.settings.medium_delay)
        await emit(WorkflowEvent.agent(AgentName.EDITING_AGENT, AgentStatus.COMPLETED))

        # 6. Final summary and report
        await emit(
            WorkflowEvent.agent(
                AgentName.REVISING_AGENT, AgentStatus.WORKING, "Generating final summary..."
            )
        )
        summary = await self.generator.generate_final_summary(agent_reports)

        report = Report(
            review_id=Report.new_review_id(),
            status=ReportStatus.COMPLETED,
            report=ReportBody(summary=summary, agent_reports=agent_reports),
        )
        await emit(WorkflowEvent.report_ready(report))
        await emit(WorkflowEvent.agent(AgentName.REVISING_AGENT, AgentStatus.COMPLETED))
        await emit(WorkflowEvent.status(ReviewStatus.COMPLETED))
        logger.info(
            f"Review {report.review_id} completed: {report.total_findings} findings "
            f"from {len(agent_reports)} agents"
        )

        # 7. CI/CD simulation
        if request.enable_cicd:
            await self._simulate_cicd(emit)

        return report

    async def _run_specialists(
        self,
        context: str,
        architecture_map: ArchitectureMap,
        emit: Callable[[WorkflowEvent], Awaitable[None]],
    ) -> list[AgentReportResult]:
        """Run every specialist concurrently; the first failure cancels the rest."""
        tasks = [
            asyncio.create_task(
                self._run_specialist(name, category, context, architecture_map, emit),
                name=f"specialist:{name.value}",
            )
            for name, category in get_specialists()
        ]
        try:
            # gather keeps the fixed role order regardless of completion order
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _run_specialist(
        self,
        name: AgentName,
        category: AnalysisCategory,
        context: str,
        architecture_map: ArchitectureMap,
        emit: Callable[[WorkflowEvent], Awaitable[None]],
    ) -> AgentReportResult:
        # The Architecture Analyst is already working since the map step
        if name != AgentName.ARCHITECTURE_ANALYST:
            await emit(WorkflowEvent.agent(name, AgentStatus.WORKING, "Taking notes..."))

        notes = await self.generator.generate_agent_notes(name, context, architecture_map)
        for note in notes:
            await emit(WorkflowEvent.kv_update(NoteEntry(agent_name=name, payload=note)))

        await emit(WorkflowEvent.agent(name, AgentStatus.WORKING, "Compiling report..."))
        report = await self.generator.generate_agent_report(name, category, notes)
        await emit(WorkflowEvent.kv_update(AgentReportEntry(agent_name=name, payload=report)))

        await emit(WorkflowEvent.agent(name, AgentStatus.COMPLETED))
        logger.info(f"{name.value} completed with {len(report.findings)} findings")
        return AgentReportResult(agent_name=name, report=report)

    async def _simulate_cicd(self, emit: Callable[[WorkflowEvent], Awaitable[None]]) -> None:
        """Illustrative status-check and PR-comment posts. No external call is made."""
        await asyncio.sleep(self.settings.short_delay)
        await emit(WorkflowEvent.log("Posting status check to GitHub..."))
        await asyncio.sleep(self.settings.medium_delay)
        await emit(WorkflowEvent.log_update(LogStatus.SUCCESS))

        await asyncio.sleep(self.settings.short_delay)
        await emit(WorkflowEvent.log("Posting report to Pull Request #42..."))
        await asyncio.sleep(self.settings.long_delay)
        await emit(WorkflowEvent.log_update(LogStatus.SUCCESS))
