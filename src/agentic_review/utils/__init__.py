"""Utility modules."""

from .file_utils import (
    ALLOWED_EXTENSIONS,
    FILE_PRIORITY_ORDER,
    IGNORED_DIRECTORIES,
    get_file_priority,
    is_processable,
    prioritize_files,
    select_files,
)
from .logging_utils import configure_logging

__all__ = [
    "ALLOWED_EXTENSIONS",
    "FILE_PRIORITY_ORDER",
    "IGNORED_DIRECTORIES",
    "get_file_priority",
    "is_processable",
    "prioritize_files",
    "select_files",
    "configure_logging",
]
