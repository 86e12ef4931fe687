"""Log analysis tool -- classify log lines into errors, warnings and pattern matches."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, Field

from ...errors import HandlerError
from ..output import check_file_size, read_text
from ..tool import ToolContext, ToolDefinition

LOG_FILE_MAX_SIZE_MB = 50
LOG_BUCKET_MAX_ENTRIES = 50
LOG_LINE_MAX_CHARS = 200

ERROR_PATTERN = re.compile(r"error|fatal|exception|fail", re.IGNORECASE)
WARNING_PATTERN = re.compile(r"warn|warning|caution", re.IGNORECASE)


class AnalyzeLogsInput(BaseModel):
    """Input schema for the analyze_logs tool."""

    path: str = Field(
        description="Log file path (e.g., ~/Documents/app.log). Use ~ for home directory."
    )
    pattern: str | None = Field(default=None, description="Custom regex pattern to search")


def _add_entry(bucket: list[dict[str, Any]], line_number: int, line: str) -> None:
    if len(bucket) < LOG_BUCKET_MAX_ENTRIES:
        bucket.append({"line": line_number, "content": line[:LOG_LINE_MAX_CHARS]})


def analyze_log_lines(lines: list[str], pattern: re.Pattern[str] | None = None) -> dict[str, Any]:
    """Classify lines; a line can land in several buckets."""
    analysis: dict[str, Any] = {
        "total_lines": len(lines),
        "errors": [],
        "warnings": [],
        "matches": [],
    }
    for index, line in enumerate(lines, start=1):
        if ERROR_PATTERN.search(line):
            _add_entry(analysis["errors"], index, line)
        if WARNING_PATTERN.search(line):
            _add_entry(analysis["warnings"], index, line)
        if pattern is not None and pattern.search(line):
            _add_entry(analysis["matches"], index, line)
    return analysis


def create_analyze_logs_tool() -> ToolDefinition:
    """Create the analyze_logs tool."""

    async def handler(ctx: ToolContext, input: AnalyzeLogsInput) -> dict[str, Any]:
        log_path = ctx.resolve(input.path)
        check_file_size(log_path, LOG_FILE_MAX_SIZE_MB)

        pattern = None
        if input.pattern:
            try:
                pattern = re.compile(input.pattern, re.IGNORECASE)
            except re.error as exc:
                raise HandlerError(f"Invalid pattern {input.pattern!r}: {exc}") from exc

        analysis = analyze_log_lines(read_text(log_path).split("\n"), pattern)

        summary = (
            f"Found {len(analysis['errors'])} errors, {len(analysis['warnings'])} warnings"
        )
        if pattern is not None:
            summary += f", {len(analysis['matches'])} pattern matches"

        return {"file": log_path, "analysis": analysis, "summary": summary}

    return ToolDefinition(
        name="analyze_logs",
        description="Analyze log files for errors, warnings, and custom patterns",
        input_model=AnalyzeLogsInput,
        handler=handler,
    )
