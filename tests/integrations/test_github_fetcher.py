"""
Tests for the GitHub content fetcher.

Run with: uv run pytest tests/integrations/test_github_fetcher.py -v

The GitHub API is simulated with httpx.MockTransport.
"""

import base64

import httpx
import pytest

from agentic_review.config import GitHubSettings
from agentic_review.exceptions import (
    BranchNotFound,
    InvalidRepoUrl,
    NoProcessableFiles,
    TreeFetchFailed,
)
from agentic_review.integrations.github import (
    CONTEXT_HEADER,
    GitHubContentFetcher,
    decode_content,
    parse_repo_url,
)

REPO_URL = "https://github.com/acme/widgets"
API = "/repos/acme/widgets"


def _encode(text: str) -> str:
    encoded = base64.b64encode(text.encode()).decode()
    # GitHub wraps base64 payloads every 60 characters
    return "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))


class FakeGitHub:
    """Minimal GitHub REST API double."""

    def __init__(
        self,
        files: dict[str, str],
        extra_paths: list[str] | None = None,
        branch_status: int = 200,
        tree_status: int = 200,
        failing: set[str] | None = None,
        listings: set[str] | None = None,
        truncated: bool = False,
    ):
        self.files = files
        self.extra_paths = extra_paths or []
        self.branch_status = branch_status
        self.tree_status = tree_status
        self.failing = failing or set()
        self.listings = listings or set()
        self.truncated = truncated
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith(f"{API}/branches/"):
            if self.branch_status != 200:
                return httpx.Response(self.branch_status, json={"message": "Branch not found"})
            return httpx.Response(200, json={"commit": {"commit": {"tree": {"sha": "tree123"}}}})

        if path == f"{API}/git/trees/tree123":
            if self.tree_status != 200:
                return httpx.Response(self.tree_status, json={"message": "boom"})
            tree = [{"path": p, "type": "blob"} for p in [*self.files, *self.extra_paths]]
            tree.append({"path": "src", "type": "tree"})
            return httpx.Response(200, json={"tree": tree, "truncated": self.truncated})

        if path.startswith(f"{API}/contents/"):
            file_path = path[len(f"{API}/contents/") :]
            if file_path in self.failing:
                return httpx.Response(500, json={"message": "error"})
            if file_path in self.listings:
                # Directory listings come back as a JSON array
                return httpx.Response(200, json=[{"path": f"{file_path}/index.ts", "type": "file"}])
            if file_path not in self.files:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(
                200, json={"encoding": "base64", "content": _encode(self.files[file_path])}
            )

        return httpx.Response(404)


def _fetcher(fake: FakeGitHub, token: str | None = None, **settings) -> GitHubContentFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake.handler))
    return GitHubContentFetcher(token=token, settings=GitHubSettings(**settings), client=client)


class TestParseRepoUrl:
    """Tests for repository URL parsing."""

    @pytest.mark.parametrize(
        "url,owner,repo",
        [
            ("https://github.com/acme/widgets", "acme", "widgets"),
            ("https://github.com/acme/widgets.git", "acme", "widgets"),
            ("https://github.com/acme/widgets/", "acme", "widgets"),
            ("https://github.com/acme/widgets/tree/main/src", "acme", "widgets"),
            ("  https://github.com/acme/widgets  ", "acme", "widgets"),
        ],
    )
    def test_valid(self, url, owner, repo):
        parsed = parse_repo_url(url)

        assert parsed.owner == owner
        assert parsed.repo == repo
        assert parsed.full_name == f"{owner}/{repo}"

    @pytest.mark.parametrize(
        "url",
        [
            "https://gitlab.com/acme/widgets",
            "https://www.github.com/acme/widgets",
            "https://github.com.evil.io/acme/widgets",
            "https://github.com/acme",
            "https://github.com/",
            "ftp://github.com/acme/widgets",
            "not a url",
            "",
        ],
    )
    def test_invalid(self, url):
        with pytest.raises(InvalidRepoUrl):
            parse_repo_url(url)


class TestDecodeContent:
    """Tests for base64 payload decoding."""

    def test_decodes_wrapped_base64(self):
        assert decode_content({"encoding": "base64", "content": _encode("hello\n" * 30)}) == (
            "hello\n" * 30
        )

    def test_rejects_other_encodings(self):
        with pytest.raises(ValueError):
            decode_content({"encoding": "none", "content": ""})

    @pytest.mark.parametrize("payload", [[{"path": "a.ts"}], "text", None])
    def test_rejects_non_object_payloads(self, payload):
        with pytest.raises(ValueError, match="unexpected contents payload"):
            decode_content(payload)


class TestFetch:
    """Tests for the fetch algorithm."""

    @pytest.mark.asyncio
    async def test_builds_context_in_priority_order(self):
        fake = FakeGitHub(
            files={
                "README.md": "# Widgets",
                "src/app.ts": "export const x = 1;",
                "package.json": '{"name": "widgets"}',
            },
            extra_paths=["node_modules/lib/index.js", "assets/logo.png"],
        )

        context = await _fetcher(fake).fetch(REPO_URL, "main")

        assert context.startswith(CONTEXT_HEADER)
        assert context.index("--- FILE: package.json ---") < context.index(
            "--- FILE: src/app.ts ---"
        )
        assert context.index("--- FILE: src/app.ts ---") < context.index(
            "--- FILE: README.md ---"
        )
        assert "export const x = 1;" in context
        assert "node_modules" not in context

    @pytest.mark.asyncio
    async def test_sends_expected_requests(self):
        fake = FakeGitHub(files={"src/app.ts": "x"})

        await _fetcher(fake, token="ghp_test").fetch(REPO_URL, "feature/login")

        branch_request, tree_request, file_request = fake.requests
        assert branch_request.url.path == f"{API}/branches/feature/login"
        assert tree_request.url.params["recursive"] == "1"
        assert file_request.url.params["ref"] == "feature/login"
        for request in fake.requests:
            assert request.method == "GET"
            assert request.headers["Accept"] == "application/vnd.github+json"
            assert request.headers["Authorization"] == "Bearer ghp_test"

    @pytest.mark.asyncio
    async def test_no_authorization_without_token(self):
        fake = FakeGitHub(files={"src/app.ts": "x"})

        await _fetcher(fake).fetch(REPO_URL, "main")

        assert all("Authorization" not in r.headers for r in fake.requests)

    @pytest.mark.asyncio
    async def test_invalid_url_makes_no_request(self):
        fake = FakeGitHub(files={"src/app.ts": "x"})

        with pytest.raises(InvalidRepoUrl):
            await _fetcher(fake).fetch("https://example.com/acme/widgets", "main")

        assert fake.requests == []

    @pytest.mark.asyncio
    async def test_branch_not_found(self):
        fake = FakeGitHub(files={"src/app.ts": "x"}, branch_status=404)

        with pytest.raises(BranchNotFound, match="404"):
            await _fetcher(fake).fetch(REPO_URL, "nope")

    @pytest.mark.asyncio
    async def test_tree_fetch_failed(self):
        fake = FakeGitHub(files={"src/app.ts": "x"}, tree_status=500)

        with pytest.raises(TreeFetchFailed):
            await _fetcher(fake).fetch(REPO_URL, "main")

    @pytest.mark.asyncio
    async def test_no_processable_files(self):
        fake = FakeGitHub(files={}, extra_paths=["assets/logo.png", "dist/app.js"])

        with pytest.raises(NoProcessableFiles):
            await _fetcher(fake).fetch(REPO_URL, "main")

    @pytest.mark.asyncio
    async def test_all_file_fetches_failing(self):
        fake = FakeGitHub(files={"a.ts": "a", "b.ts": "b"}, failing={"a.ts", "b.ts"})

        with pytest.raises(NoProcessableFiles):
            await _fetcher(fake).fetch(REPO_URL, "main")

    @pytest.mark.asyncio
    async def test_partial_failure_drops_file(self, caplog):
        fake = FakeGitHub(files={"a.ts": "alpha", "b.ts": "beta"}, failing={"b.ts"})

        result = await _fetcher(fake).fetch_with_details(REPO_URL, "main")

        assert result.files_included == ["a.ts"]
        assert [s.path for s in result.skipped] == ["b.ts"]
        assert "--- FILE: b.ts ---" not in result.context
        assert "Could not fetch content for b.ts" in caplog.text

    @pytest.mark.asyncio
    async def test_list_payload_drops_file(self):
        fake = FakeGitHub(files={"a.ts": "alpha", "b.ts": "beta"}, listings={"b.ts"})

        result = await _fetcher(fake).fetch_with_details(REPO_URL, "main")

        assert result.files_included == ["a.ts"]
        assert [s.path for s in result.skipped] == ["b.ts"]

    @pytest.mark.asyncio
    async def test_truncated_tree_is_reported(self, caplog):
        fake = FakeGitHub(files={"a.ts": "alpha"}, truncated=True)

        result = await _fetcher(fake).fetch_with_details(REPO_URL, "main")

        assert result.truncated is True
        assert "truncated" in caplog.text

    @pytest.mark.asyncio
    async def test_respects_max_files_and_batches(self):
        files = {f"src/f{i:02d}.ts": f"// {i}" for i in range(25)}
        fake = FakeGitHub(files=files)

        result = await _fetcher(fake, max_files=12, batch_size=5).fetch_with_details(
            REPO_URL, "main"
        )

        assert result.files_included == list(files)[:12]
        content_requests = [r for r in fake.requests if "/contents/" in r.url.path]
        assert len(content_requests) == 12
