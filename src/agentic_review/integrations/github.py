"""
GitHub integration for Agentic Review.

Resolves a repository URL and branch into a single text blob of source files
using the GitHub REST API (branch, recursive tree and contents endpoints).
"""

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote, urlparse

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from agentic_review.config import GitHubSettings, get_settings
from agentic_review.exceptions import (
    BranchNotFound,
    FileFetchPartialFailure,
    InvalidRepoUrl,
    NoProcessableFiles,
    TreeFetchFailed,
)
from agentic_review.utils.file_utils import select_files

logger = logging.getLogger(__name__)

GITHUB_WEB_HOST = "github.com"
CONTEXT_HEADER = "Here is the codebase to analyze:\n\n"


class GitHubRepo(BaseModel):
    """Parsed GitHub repository info."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1, max_length=100, description="Repository owner")
    repo: str = Field(..., min_length=1, max_length=100, description="Repository name")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class FetchResult:
    """Outcome of a repository fetch."""

    context: str
    files_included: list[str] = field(default_factory=list)
    skipped: list[FileFetchPartialFailure] = field(default_factory=list)
    truncated: bool = False


def parse_repo_url(url: str) -> GitHubRepo:
    """Parse a GitHub web URL into owner and repository name.

    Args:
        url: URL like ``https://github.com/<owner>/<repo>[.git]``.

    Returns:
        GitHubRepo with parsed info.

    Raises:
        InvalidRepoUrl: If the host is not github.com or the path is too short.
    """
    message = (
        "Invalid GitHub repository URL. "
        "Please use a format like https://github.com/owner/repo."
    )
    try:
        parsed = urlparse(url.strip())
    except ValueError as e:
        raise InvalidRepoUrl(message) from e

    if parsed.scheme not in ("http", "https") or parsed.hostname != GITHUB_WEB_HOST:
        raise InvalidRepoUrl(message)

    parts = [segment for segment in parsed.path.split("/") if segment]
    if len(parts) < 2:
        raise InvalidRepoUrl(message)

    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        raise InvalidRepoUrl(message)

    try:
        return GitHubRepo(owner=owner, repo=repo)
    except ValidationError as e:
        raise InvalidRepoUrl(message) from e


def decode_content(payload: Any) -> str:
    """Decode a contents API payload.

    Raises:
        ValueError: If the payload is not a file object, is not base64 or
            cannot be decoded.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"unexpected contents payload of type {type(payload).__name__}")
    encoding = payload.get("encoding")
    if encoding != "base64":
        raise ValueError(f"unexpected encoding '{encoding}'")
    raw = "".join(str(payload.get("content", "")).split())
    try:
        return base64.b64decode(raw, validate=True).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 content: {e}") from e


def build_context(files: list[tuple[str, str]]) -> str:
    """Concatenate (path, content) pairs into the delimited context blob."""
    parts = [CONTEXT_HEADER]
    for path, content in files:
        parts.append(f"--- FILE: {path} ---\n{content}\n\n")
    return "".join(parts)


class GitHubContentFetcher:
    """
    Fetches repository source files through the GitHub REST API.

    Only read-only GET requests are issued.
    """

    def __init__(
        self,
        token: str | None = None,
        settings: GitHubSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize GitHub fetcher.

        Args:
            token: GitHub token (uses config/env if not provided)
            settings: GitHub settings override
            client: Preconfigured HTTP client (tests inject a MockTransport)
        """
        app_settings = get_settings()
        self.settings = settings or app_settings.github
        self.token = token or app_settings.agents.github_token
        self._client = client

        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    async def fetch(self, repo_url: str, branch: str) -> str:
        """Fetch the repository and return the context text."""
        result = await self.fetch_with_details(repo_url, branch)
        return result.context

    async def fetch_with_details(self, repo_url: str, branch: str) -> FetchResult:
        """
        Fetch, filter, rank and concatenate repository files.

        Args:
            repo_url: GitHub web URL
            branch: Branch name

        Returns:
            FetchResult with the context blob and fetch diagnostics

        Raises:
            InvalidRepoUrl, BranchNotFound, TreeFetchFailed, NoProcessableFiles
        """
        repo_info = parse_repo_url(repo_url)

        if self._client is not None:
            return await self._fetch(self._client, repo_info, branch)

        async with httpx.AsyncClient(
            timeout=self.settings.timeout_seconds,
        ) as client:
            return await self._fetch(client, repo_info, branch)

    async def _fetch(
        self,
        client: httpx.AsyncClient,
        repo_info: GitHubRepo,
        branch: str,
    ) -> FetchResult:
        repo_path = f"{self.settings.api_base}/repos/{repo_info.owner}/{repo_info.repo}"

        tree_sha = await self._get_tree_sha(client, repo_path, branch)
        entries, truncated = await self._get_tree(client, repo_path, tree_sha)

        if truncated:
            logger.warning(
                f"Repository tree for {repo_info.full_name} was truncated by the GitHub API. "
                "Analysis may be incomplete."
            )

        blob_paths = [e["path"] for e in entries if e.get("type") == "blob" and "path" in e]
        selected = select_files(blob_paths, self.settings.max_files)

        if not selected:
            raise NoProcessableFiles(
                "No processable source code files found in the repository. "
                "Check the branch or repository content."
            )

        logger.info(
            f"Fetching {len(selected)} of {len(blob_paths)} files from "
            f"{repo_info.full_name}@{branch}"
        )

        fetched: list[tuple[str, str]] = []
        skipped: list[FileFetchPartialFailure] = []
        batch_size = self.settings.batch_size

        for start in range(0, len(selected), batch_size):
            batch = selected[start : start + batch_size]
            results = await asyncio.gather(
                *(self._get_file(client, repo_path, path, branch) for path in batch)
            )
            for path, outcome in zip(batch, results):
                if isinstance(outcome, FileFetchPartialFailure):
                    logger.warning(str(outcome))
                    skipped.append(outcome)
                else:
                    fetched.append((path, outcome))

        if not fetched:
            raise NoProcessableFiles(
                "Failed to fetch content for any of the selected source files."
            )

        return FetchResult(
            context=build_context(fetched),
            files_included=[path for path, _ in fetched],
            skipped=skipped,
            truncated=truncated,
        )

    async def _get_tree_sha(self, client: httpx.AsyncClient, repo_path: str, branch: str) -> str:
        url = f"{repo_path}/branches/{quote(branch, safe='')}"
        try:
            response = await client.get(url, headers=self.headers)
        except httpx.HTTPError as e:
            raise BranchNotFound(f"Could not find branch '{branch}': {e}") from e

        if not response.is_success:
            raise BranchNotFound(
                f"Could not find branch '{branch}'. Status: {response.status_code}. "
                "Please check the repository URL and branch name."
            )

        try:
            return str(response.json()["commit"]["commit"]["tree"]["sha"])
        except (KeyError, TypeError, ValueError) as e:
            raise BranchNotFound(f"Unexpected branch payload for '{branch}'") from e

    async def _get_tree(
        self, client: httpx.AsyncClient, repo_path: str, tree_sha: str
    ) -> tuple[list[dict[str, Any]], bool]:
        url = f"{repo_path}/git/trees/{tree_sha}"
        try:
            response = await client.get(url, params={"recursive": "1"}, headers=self.headers)
        except httpx.HTTPError as e:
            raise TreeFetchFailed(f"Failed to fetch repository file tree: {e}") from e

        if not response.is_success:
            raise TreeFetchFailed(
                f"Failed to fetch repository file tree. Status: {response.status_code}"
            )

        try:
            data = response.json()
            return list(data["tree"]), bool(data.get("truncated", False))
        except (KeyError, TypeError, ValueError) as e:
            raise TreeFetchFailed("Unexpected tree payload") from e

    async def _get_file(
        self, client: httpx.AsyncClient, repo_path: str, path: str, branch: str
    ) -> str | FileFetchPartialFailure:
        url = f"{repo_path}/contents/{quote(path)}"
        try:
            response = await client.get(url, params={"ref": branch}, headers=self.headers)
            if not response.is_success:
                return FileFetchPartialFailure(path, f"status {response.status_code}")
            return decode_content(response.json())
        except (httpx.HTTPError, ValueError) as e:
            return FileFetchPartialFailure(path, str(e))
