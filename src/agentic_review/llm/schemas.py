"""
Response schemas for Gemini structured output.

Schemas use the Gemini OpenAPI subset (upper-case type names). Report schemas
are built once per category so every finding's category is pinned to the
owning agent's category.
"""

from copy import deepcopy
from types import MappingProxyType
from typing import Any

from agentic_review.models.agents import AnalysisCategory
from agentic_review.models.findings import Severity

SEVERITY_VALUES = [s.value for s in Severity]

CODE_SPECIFIC_SUGGESTION_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "filePath": {
            "type": "STRING",
            "description": "The full path of the file where the issue is located.",
        },
        "functionName": {
            "type": "STRING",
            "description": "The name of the function where the issue is located.",
        },
        "lineStart": {
            "type": "INTEGER",
            "description": "The starting line number of the code block.",
        },
        "lineEnd": {
            "type": "INTEGER",
            "description": "The ending line number of the code block.",
        },
        "suggestion": {
            "type": "STRING",
            "description": "A concrete, code-specific suggestion for the fix.",
        },
    },
    "required": ["filePath", "functionName", "lineStart", "lineEnd", "suggestion"],
}

ARCHITECTURE_MAP_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "STRING",
            "description": "A brief summary of the overall architecture.",
        },
        "files": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "path": {"type": "STRING"},
                    "description": {
                        "type": "STRING",
                        "description": "A one-sentence description of the file's purpose.",
                    },
                    "components": {
                        "type": "ARRAY",
                        "items": {"type": "STRING"},
                        "description": "List of key functions or classes in this file.",
                    },
                },
                "required": ["path", "description", "components"],
            },
        },
    },
    "required": ["summary", "files"],
}

AGENT_NOTES_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "notes": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "filePath": {
                        "type": "STRING",
                        "description": "The path to the file where the observation was made.",
                    },
                    "finding": {
                        "type": "STRING",
                        "description": "A detailed description of the specific finding or observation.",
                    },
                    "severity": {"type": "STRING", "enum": SEVERITY_VALUES},
                },
                "required": ["filePath", "finding", "severity"],
            },
        }
    },
    "required": ["notes"],
}


def build_finding_schema(category: AnalysisCategory) -> dict[str, Any]:
    """Build a finding schema whose category accepts only ``category``."""
    return {
        "type": "OBJECT",
        "properties": {
            "category": {
                "type": "STRING",
                "enum": [category.value],
                "description": "The category of the weakness.",
            },
            "title": {
                "type": "STRING",
                "description": "A short, descriptive title for the weakness found.",
            },
            "description": {
                "type": "STRING",
                "description": "A detailed but concise explanation of the weakness.",
            },
            "severity": {"type": "STRING", "enum": SEVERITY_VALUES},
            "suggestion": {
                "type": "STRING",
                "description": "A high-level, code-agnostic suggestion for improvement.",
            },
            "codeSpecificSuggestion": deepcopy(CODE_SPECIFIC_SUGGESTION_SCHEMA),
        },
        "required": [
            "category",
            "title",
            "description",
            "severity",
            "suggestion",
            "codeSpecificSuggestion",
        ],
    }


def build_agent_report_schema(category: AnalysisCategory) -> dict[str, Any]:
    """Build an agent report schema pinned to ``category``."""
    return {
        "type": "OBJECT",
        "properties": {
            "summary": {
                "type": "STRING",
                "description": "A concise summary of all findings for this agent's domain.",
            },
            "findings": {"type": "ARRAY", "items": build_finding_schema(category)},
        },
        "required": ["summary", "findings"],
    }


REPORT_SCHEMAS: MappingProxyType[AnalysisCategory, dict[str, Any]] = MappingProxyType(
    {category: build_agent_report_schema(category) for category in AnalysisCategory}
)


def get_report_schema(category: AnalysisCategory) -> dict[str, Any]:
    """Get a copy of the report schema for ``category``."""
    return deepcopy(REPORT_SCHEMAS[category])
