"""Agentic Review CLI with Typer."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import get_settings
from .exceptions import InvalidRepoUrl
from .models import AgentStatus, LogStatus, WorkflowEvent, WorkflowEventType
from .utils.logging_utils import configure_logging

app = typer.Typer(
    name="agentic-review",
    help="Agentic Review - Multi-agent AI code review for GitHub repositories",
    add_completion=False,
)
console = Console(highlight=False)

LOG_ICONS = {
    LogStatus.PENDING: "[yellow]…[/]",
    LogStatus.SUCCESS: "[bold green]✓[/]",
    LogStatus.ERROR: "[bold red]✗[/]",
}

AGENT_STYLES = {
    AgentStatus.WORKING: "cyan",
    AgentStatus.COMPLETED: "green",
    AgentStatus.ERROR: "red",
    AgentStatus.IDLE: "dim",
}


def _check_api_keys() -> bool:
    """Check that the Gemini key is configured.

    Returns:
        True if the key is present, False otherwise.
        Also prints helpful error messages.
    """
    settings = get_settings()
    if settings.agents.effective_google_key:
        return True

    console.print("\n[bold red]✗ Missing API key:[/]")
    console.print("  • GOOGLE_API_KEY - Required for Gemini (all review agents)")
    console.print("\n[dim]Set this environment variable (or GEMINI_API_KEY) and try again.[/]")
    console.print("[dim]Example: export GOOGLE_API_KEY=AIza...[/]")
    return False


def _print_event(event: WorkflowEvent) -> None:
    """Print a workflow event as it arrives."""
    if event.type == WorkflowEventType.AGENT_STATUS and event.agent_name:
        style = AGENT_STYLES.get(event.agent_status, "white")
        task = f" - {event.task}" if event.task else ""
        console.print(
            f"  [{style}]{event.agent_name.value}: {event.agent_status.value}{task}[/]"
        )
    elif event.type == WorkflowEventType.LOG:
        console.print(f"{LOG_ICONS[event.log_status or LogStatus.PENDING]} {event.message}")
    elif event.type == WorkflowEventType.LOG_UPDATE:
        icon = LOG_ICONS[event.log_status or LogStatus.SUCCESS]
        console.print(f"{icon} {event.message or 'Done.'}")
    elif event.type == WorkflowEventType.KV_UPDATE and event.entry is not None:
        console.print(f"    [dim]cache: {event.entry.type} from {event.entry.agent_name.value}[/]")
    elif event.type == WorkflowEventType.ERROR:
        console.print(f"[bold red]✗ {event.error}[/]")


@app.command("review")
def run_review(
    repo_url: str = typer.Argument(..., help="GitHub repository URL"),
    branch: str = typer.Option("main", "--branch", "-b", help="Branch to review"),
    cicd: bool = typer.Option(True, "--cicd/--no-cicd", help="Simulate CI/CD status and PR posts"),
    output: Path = typer.Option(Path("."), "--output", "-o", help="Output directory"),
    json_output: bool = typer.Option(False, "--json", help="Also save the report as JSON"),
):
    """Run a multi-agent code review on a GitHub repository."""
    from .integrations.github import parse_repo_url
    from .review.orchestrator import ReviewRequest, WorkflowOrchestrator
    from .review.projector import SessionProjector
    from .review.report_generator import ReportGenerator

    settings = get_settings()
    configure_logging("WARNING" if settings.log_level == "INFO" else settings.log_level)

    # Check API keys before starting
    if not _check_api_keys():
        raise typer.Exit(1)

    try:
        repo = parse_repo_url(repo_url)
    except InvalidRepoUrl as e:
        console.print(f"[bold red]✗[/] {e}")
        raise typer.Exit(1) from e

    console.print("=" * 60)
    console.print("[bold blue]Agentic Review[/] - Code Review")
    console.print("=" * 60)
    console.print(f"  Repository: {repo.full_name}")
    console.print(f"  Branch: {branch}")
    console.print(f"  CI/CD simulation: {'on' if cicd else 'off'}")
    console.print("=" * 60)

    projector = SessionProjector()

    async def progress(event: WorkflowEvent) -> None:
        projector.apply(event)
        _print_event(event)

    request = ReviewRequest(repo_url=repo_url, branch=branch, enable_cicd=cicd)
    report = asyncio.run(WorkflowOrchestrator().run(request, progress_callback=progress))

    if report is None:
        console.print(f"\n[bold red]✗[/] {projector.session.error or 'Review failed'}")
        raise typer.Exit(1)

    table = Table(title="Findings by Agent")
    table.add_column("Agent", style="cyan")
    table.add_column("Findings", justify="right")
    for result in report.report.agent_reports:
        table.add_row(result.agent_name.value, str(len(result.report.findings)))
    console.print()
    console.print(table)

    console.print("\n[bold]Executive Summary:[/]")
    console.print(report.report.summary)

    formats = ["markdown", "json"] if json_output else ["markdown"]
    saved = ReportGenerator.save_report(report, output, formats=formats)

    console.print(f"\n[bold green]✓[/] Review {report.review_id} completed")
    for fmt, path in saved.items():
        console.print(f"  {fmt.capitalize()}: {path}")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Server host"),
    port: int | None = typer.Option(None, "--port", "-p", help="Server port"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.server.host
    port = port or settings.server.port

    # Missing key is fatal at startup
    if not _check_api_keys():
        raise typer.Exit(1)

    console.print("=" * 60)
    console.print("[bold blue]Agentic Review[/] - API Server")
    console.print("=" * 60)
    console.print(f"  URL: http://{host}:{port}")
    console.print(f"  Docs: http://{host}:{port}/docs")
    console.print("=" * 60)

    uvicorn.run(
        "agentic_review.api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command("status")
def status():
    """Show Agentic Review configuration."""
    settings = get_settings()

    console.print("=" * 60)
    console.print("[bold blue]Agentic Review[/] - Status")
    console.print("=" * 60)

    gemini_ok = "✓" if settings.agents.effective_google_key else "✗"
    github_ok = "✓" if settings.agents.github_token else "-"

    console.print("\n[bold]Services:[/]")
    console.print(f"  [{gemini_ok}] Gemini ({settings.agents.gemini_model})")
    console.print(f"  [{github_ok}] GitHub token ({settings.github.api_base})")

    console.print("\n[bold]Fetch limits:[/]")
    console.print(f"  Max files: {settings.github.max_files}")
    console.print(f"  Batch size: {settings.github.batch_size}")


def main():
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
