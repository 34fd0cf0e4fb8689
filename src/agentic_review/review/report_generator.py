"""
Report generator for Agentic Review.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from agentic_review.models import AgentName, AgentReportResult, Finding, Report

logger = logging.getLogger(__name__)

REVIEW_ID_PATTERN = re.compile(r"^\*\*Review ID:\*\* `([^`]+)`\s*$", re.MULTILINE)
AGENT_HEADING_PATTERN = re.compile(
    r"^## (" + "|".join(re.escape(name.value) for name in AgentName) + r") Report\s*$"
)
FINDING_HEADING_PATTERN = re.compile(r"^#### \d+\. ")

# Headings and fences at the start of a line in generated text
STRUCTURAL_LINE_PATTERN = re.compile(r"^([ \t]*)(#|```|~~~)", re.MULTILINE)


def escape_text(text: str) -> str:
    """Backslash-escape heading and fence markers in generated free text."""
    return STRUCTURAL_LINE_PATTERN.sub(r"\1\\\2", text)


@dataclass
class ParsedReport:
    """Headings recovered from an exported Markdown report."""

    review_id: str | None = None
    findings_per_agent: dict[str, int] = field(default_factory=dict)

    @property
    def total_findings(self) -> int:
        return sum(self.findings_per_agent.values())


class ReportGenerator:
    """
    Generates the downloadable Markdown report from a Report.
    """

    @staticmethod
    def to_markdown(report: Report) -> str:
        """
        Generate a Markdown report.

        Args:
            report: The final report to format

        Returns:
            Formatted Markdown string
        """
        agent_sections = "\n".join(
            ReportGenerator._generate_agent_section(result)
            for result in report.report.agent_reports
        )

        document = (
            "# Code Review Report\n\n"
            f"**Review ID:** `{report.review_id}`\n\n"
            "## Executive Summary\n\n"
            f"{escape_text(report.report.summary)}\n\n"
            "---\n\n"
            f"{agent_sections}"
        )
        return document.strip()

    @staticmethod
    def _generate_agent_section(result: AgentReportResult) -> str:
        """Generate one agent's section."""
        findings = "".join(
            ReportGenerator._format_finding(finding, index)
            for index, finding in enumerate(result.report.findings)
        )
        return (
            f"\n## {result.agent_name.value} Report\n\n"
            "### Summary\n\n"
            f"{escape_text(result.report.summary)}\n\n"
            "### Detailed Findings\n\n"
            f"{findings}\n"
            "---\n"
        )

    @staticmethod
    def _format_finding(finding: Finding, index: int) -> str:
        """Format a single finding with its diff-style recommendation."""
        title = " ".join(finding.title.split())
        suggestion = finding.suggestion.replace("\n", "\n> ")
        lines = [
            f"#### {index + 1}. {title}\n\n",
            f"- **Category:** {finding.category.value}\n",
            f"- **Severity:** {finding.severity.value}\n\n",
            f"**Description:**\n{escape_text(finding.description)}\n\n",
            "**Algorithmic Suggestion:**\n",
            f"> {suggestion}\n\n",
        ]

        code = finding.code_specific_suggestion
        diff = code.suggestion.replace("\n", "\n+ ")
        lines.extend(
            [
                "**Actionable Recommendation:**\n",
                f"- **File:** `{code.file_path}`\n",
                f"- **Function:** `{code.function_name}`\n",
                f"- **Lines:** `{code.line_start}-{code.line_end}`\n\n",
                f"```diff\n- (Existing Code)\n+ {diff}\n```\n\n",
            ]
        )
        return "".join(lines)

    @staticmethod
    def parse_markdown(markdown: str) -> ParsedReport:
        """
        Recover the review id and per-agent finding counts from an export.

        Headings inside fenced code blocks are ignored.
        """
        parsed = ParsedReport()

        match = REVIEW_ID_PATTERN.search(markdown)
        if match:
            parsed.review_id = match.group(1)

        current_agent: str | None = None
        in_fence = False
        for line in markdown.splitlines():
            if line.startswith("```"):
                in_fence = not in_fence
                continue
            if in_fence:
                continue

            agent_match = AGENT_HEADING_PATTERN.match(line)
            if agent_match:
                current_agent = agent_match.group(1)
                parsed.findings_per_agent.setdefault(current_agent, 0)
            elif current_agent and FINDING_HEADING_PATTERN.match(line):
                parsed.findings_per_agent[current_agent] += 1

        return parsed

    @staticmethod
    def report_filename(report: Report) -> str:
        """Get the download filename of a report."""
        return f"code-review-report-{report.review_id}.md"

    @staticmethod
    def save_report(
        report: Report,
        output_dir: str | Path,
        formats: list[str] | None = None,
    ) -> dict[str, Path]:
        """
        Save report to files.

        Args:
            report: The report to save
            output_dir: Directory to save reports
            formats: List of formats ("markdown", "json", or both)

        Returns:
            Dictionary mapping format to file path
        """
        if formats is None:
            formats = ["markdown"]

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        saved = {}

        if "markdown" in formats:
            md_path = output_dir / ReportGenerator.report_filename(report)
            md_path.write_text(ReportGenerator.to_markdown(report), encoding="utf-8")
            saved["markdown"] = md_path

        if "json" in formats:
            json_path = output_dir / f"code-review-report-{report.review_id}.json"
            json_path.write_text(report.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
            saved["json"] = json_path

        logger.info(f"Saved report {report.review_id} to {output_dir}")
        return saved
