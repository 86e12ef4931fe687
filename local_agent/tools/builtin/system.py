"""System inspection tools -- disk usage of a directory and the process table."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from ...errors import HandlerError
from ..output import MEGABYTE, parse_size_to_bytes
from ..process import run_command
from ..tool import ToolContext, ToolDefinition

logger = logging.getLogger(__name__)

DISK_USAGE_TOP_ITEMS = 20
DISK_USAGE_MAX_OUTPUT_BYTES = 10 * MEGABYTE

PROCESS_LIST_MAX_ROWS = 50
PROCESS_LIST_MAX_OUTPUT_BYTES = 5 * MEGABYTE
PROCESS_COMMAND_MAX_CHARS = 100

# ps aux columns: USER PID %CPU %MEM VSZ RSS TT STAT STARTED TIME COMMAND
_PS_MIN_COLUMNS = 11


# -- get_disk_usage -----------------------------------------------------------


class GetDiskUsageInput(BaseModel):
    """Input schema for the get_disk_usage tool."""

    path: str = Field(
        description=(
            "Directory path to analyze (e.g., ~/Documents, ~/Desktop, ~/Downloads). "
            "Use ~ for home directory."
        )
    )


def parse_du_output(stdout: str, directory: str) -> list[dict[str, Any]]:
    """Parse ``du -sh`` output into items sorted by size, largest first."""
    items: list[dict[str, Any]] = []
    for line in stdout.strip().split("\n"):
        if not line.strip():
            continue
        size, _, full_path = line.partition("\t")
        if not full_path:
            logger.debug("Skipping malformed du line: %r", line)
            continue
        items.append(
            {
                "path": os.path.relpath(full_path, directory),
                "full_path": full_path,
                "size": size.strip(),
                "size_bytes": parse_size_to_bytes(size),
            }
        )
    items.sort(key=lambda item: item["size_bytes"], reverse=True)
    return items


def create_get_disk_usage_tool() -> ToolDefinition:
    """Create the get_disk_usage tool."""

    async def handler(ctx: ToolContext, input: GetDiskUsageInput) -> dict[str, Any]:
        dir_path = ctx.resolve(input.path)
        if not os.path.isdir(dir_path):
            raise HandlerError(f"Not a directory: {dir_path}")

        # Same set a shell glob of dir/* would expand to
        children = sorted(
            os.path.join(dir_path, name)
            for name in os.listdir(dir_path)
            if not name.startswith(".")
        )
        if not children:
            return {"directory": dir_path, "items": [], "total_items": 0}

        result = await run_command(
            ["du", "-sh", "--", *children],
            timeout=ctx.command_timeout,
            max_output_bytes=DISK_USAGE_MAX_OUTPUT_BYTES,
        )
        if result.exit_code != 0:
            # du still reports every readable child when some are unreadable
            logger.debug("du exited with %d for %s", result.exit_code, dir_path)

        items = parse_du_output(result.stdout, dir_path)
        return {
            "directory": dir_path,
            "items": items[:DISK_USAGE_TOP_ITEMS],
            "total_items": len(items),
        }

    return ToolDefinition(
        name="get_disk_usage",
        description=(
            "Get disk usage statistics for a directory (top 20 largest items). "
            "Only allowed directories are accessible."
        ),
        input_model=GetDiskUsageInput,
        handler=handler,
    )


# -- list_processes -----------------------------------------------------------


class ListProcessesInput(BaseModel):
    """Input schema for the list_processes tool (no arguments)."""


def _percent(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


def parse_ps_output(stdout: str, max_rows: int = PROCESS_LIST_MAX_ROWS) -> list[dict[str, Any]]:
    """Parse ``ps aux`` output.

    The header is skipped, only the first ``max_rows`` rows are considered,
    and the result is sorted by CPU usage, highest first.
    """
    processes: list[dict[str, Any]] = []
    for line in stdout.split("\n")[1 : max_rows + 1]:
        parts = line.split()
        if len(parts) < _PS_MIN_COLUMNS:
            continue
        processes.append(
            {
                "user": parts[0],
                "pid": parts[1],
                "cpu": _percent(parts[2]),
                "mem": _percent(parts[3]),
                "vsz": parts[4],
                "rss": parts[5],
                "stat": parts[7],
                "command": " ".join(parts[10:])[:PROCESS_COMMAND_MAX_CHARS],
            }
        )
    processes.sort(key=lambda p: p["cpu"], reverse=True)
    return processes


def create_list_processes_tool() -> ToolDefinition:
    """Create the list_processes tool."""

    async def handler(ctx: ToolContext, input: ListProcessesInput) -> dict[str, Any]:
        result = await run_command(
            ["ps", "aux"],
            timeout=ctx.command_timeout,
            max_output_bytes=PROCESS_LIST_MAX_OUTPUT_BYTES,
        )
        if result.exit_code != 0 and not result.stdout:
            raise HandlerError(f"Failed to list processes: ps exited with {result.exit_code}")

        processes = parse_ps_output(result.stdout)
        return {
            "processes": processes,
            "count": len(processes),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return ToolDefinition(
        name="list_processes",
        description="List running processes (ps aux, top 50)",
        input_model=ListProcessesInput,
        handler=handler,
    )
