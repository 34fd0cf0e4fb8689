"""External service integrations."""

from .github import (
    FetchResult,
    GitHubContentFetcher,
    GitHubRepo,
    build_context,
    decode_content,
    parse_repo_url,
)

__all__ = [
    "FetchResult",
    "GitHubContentFetcher",
    "GitHubRepo",
    "build_context",
    "decode_content",
    "parse_repo_url",
]
