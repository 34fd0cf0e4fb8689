"""
Tests for the review HTTP API.

Run with: uv run pytest tests/api/test_review_routes.py -v
"""

import time
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from agentic_review.api.main import create_app
from agentic_review.api.session_manager import ReviewSessionManager, get_session_manager
from agentic_review.review.orchestrator import WorkflowOrchestrator

REPO_URL = "https://github.com/acme/widgets"


@pytest.fixture
def manager(
    sample_fetch_result, sample_architecture_map, make_note, make_agent_report, fast_workflow_settings
):
    """Session manager wired to mocked collaborators."""
    fetcher = MagicMock()
    fetcher.fetch_with_details = AsyncMock(return_value=sample_fetch_result)

    generator = MagicMock()
    generator.generate_architecture_map = AsyncMock(return_value=sample_architecture_map)
    generator.generate_agent_notes = AsyncMock(
        side_effect=lambda agent, context, architecture_map: [make_note(agent)]
    )
    generator.generate_agent_report = AsyncMock(
        side_effect=lambda agent, category, notes: make_agent_report(category)
    )
    generator.generate_final_summary = AsyncMock(return_value="All good.")

    return ReviewSessionManager(
        orchestrator_factory=lambda: WorkflowOrchestrator(
            fetcher, generator, fast_workflow_settings
        )
    )


@pytest.fixture
def client(manager):
    """Test client with the session manager overridden."""
    app = create_app()
    app.dependency_overrides[get_session_manager] = lambda: manager
    with TestClient(app) as test_client:
        yield test_client


def _wait_for_status(client: TestClient, *statuses: str, timeout: float = 5.0) -> dict:
    deadline = time.monotonic() + timeout
    while True:
        data = client.get("/api/review").json()
        if data["status"] in statuses or time.monotonic() > deadline:
            return data
        time.sleep(0.02)


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["gemini_configured"] is True


class TestReviewRoutes:
    """Tests for /api/review."""

    def test_initial_session_is_idle(self, client):
        data = client.get("/api/review").json()

        assert data["status"] == "idle"
        assert len(data["agents"]) == 10
        assert data["report"] is None

    def test_invalid_repo_url(self, client):
        response = client.post(
            "/api/review", json={"repo_url": "https://gitlab.com/acme/widgets", "branch": "main"}
        )

        assert response.status_code == 422
        assert "Invalid GitHub repository URL" in response.json()["detail"]

    def test_missing_repo_url(self, client):
        assert client.post("/api/review", json={"branch": "main"}).status_code == 422

    def test_report_not_available(self, client):
        assert client.get("/api/review/report.md").status_code == 404

    @pytest.mark.functional
    def test_full_review_and_download(self, client):
        response = client.post(
            "/api/review", json={"repo_url": REPO_URL, "branch": "main", "enable_cicd": False}
        )
        assert response.status_code == 202
        assert response.json()["status"] == "in_progress"

        data = _wait_for_status(client, "completed", "error")
        assert data["status"] == "completed"
        assert data["report"]["review_id"].startswith("rev_")
        assert len(data["report"]["report"]["agentReports"]) == 6
        assert [entry["id"] for entry in data["cache"]] == list(range(len(data["cache"])))

        download = client.get("/api/review/report.md")
        assert download.status_code == 200
        assert download.text.startswith("# Code Review Report")
        assert "code-review-report-rev_" in download.headers["content-disposition"]

    @pytest.mark.functional
    def test_reset_returns_idle(self, client):
        client.post("/api/review", json={"repo_url": REPO_URL, "enable_cicd": False})
        _wait_for_status(client, "completed", "error")

        data = client.post("/api/review/reset").json()

        assert data["status"] == "idle"
        assert data["cache"] == []
        assert client.get("/api/review/report.md").status_code == 404
