"""
File selection utilities for repository tree listings.
"""

from collections.abc import Iterable, Sequence

ALLOWED_EXTENSIONS: tuple[str, ...] = (
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".py",
    ".java",
    ".go",
    ".rb",
    ".php",
    ".cs",
    ".html",
    ".css",
    ".scss",
    ".json",
    ".yml",
    ".yaml",
    ".md",
    "Dockerfile",
)

IGNORED_DIRECTORIES: frozenset[str] = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        "coverage",
        ".git",
        ".github",
        "vendor",
        "target",
        "assets",
        "img",
        "images",
        "docs",
    }
)

# Manifests first, code next, docs last
FILE_PRIORITY_ORDER: tuple[str, ...] = (
    "package.json",
    "Dockerfile",
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".py",
    ".java",
    ".go",
    ".rb",
    ".php",
    ".cs",
    ".html",
    ".css",
    ".scss",
    ".yml",
    ".yaml",
    ".json",
    ".md",
)


def is_processable(path: str) -> bool:
    """
    Check if a repository path should be sent for analysis.

    Args:
        path: Slash-separated path from the tree listing

    Returns:
        True if the suffix is allowed and no segment is an ignored directory
    """
    if not path.endswith(ALLOWED_EXTENSIONS):
        return False
    return not any(segment in IGNORED_DIRECTORIES for segment in path.split("/"))


def get_file_priority(path: str) -> int:
    """
    Rank a path by FILE_PRIORITY_ORDER.

    An exact filename match outranks an extension match. Unranked paths get
    ``len(FILE_PRIORITY_ORDER)`` so they sort last.
    """
    file_name = path.rsplit("/", 1)[-1]
    if file_name in FILE_PRIORITY_ORDER:
        return FILE_PRIORITY_ORDER.index(file_name)

    extension = "." + file_name.rsplit(".", 1)[-1]
    if extension in FILE_PRIORITY_ORDER:
        return FILE_PRIORITY_ORDER.index(extension)
    return len(FILE_PRIORITY_ORDER)


def prioritize_files(paths: Iterable[str]) -> list[str]:
    """Sort paths by priority. Stable for equal ranks."""
    return sorted(paths, key=get_file_priority)


def select_files(blob_paths: Sequence[str], max_files: int) -> list[str]:
    """
    Filter, rank and cap blob paths from a tree listing.

    Args:
        blob_paths: Paths of blob entries, in listing order
        max_files: Maximum number of paths to keep

    Returns:
        Ordered list of at most ``max_files`` paths
    """
    return prioritize_files(p for p in blob_paths if is_processable(p))[:max_files]
