"""File tools -- read files, list directories, search by name, file metadata.

Paths have already been approved by the permission evaluator when these
handlers run; they resolve them with the same home-relative rules.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import os
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Any

from pydantic import BaseModel, Field

from ...errors import HandlerError
from ..output import check_file_size, format_file_size, read_text, truncate_content
from ..tool import ToolContext, ToolDefinition

logger = logging.getLogger(__name__)

READ_FILE_MAX_SIZE_MB = 10
READ_FILE_MAX_CHARS = 50_000
LIST_DIRECTORY_MAX_ENTRIES = 500
SEARCH_FILES_MAX_RESULTS = 100


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def _file_item(name: str, full_path: str, stats: os.stat_result) -> dict[str, Any]:
    return {
        "name": name,
        "path": full_path,
        "size": stats.st_size,
        "size_formatted": format_file_size(stats.st_size),
        "modified": _iso(stats.st_mtime),
    }


# -- read_file ----------------------------------------------------------------


class ReadFileInput(BaseModel):
    """Input schema for the read_file tool."""

    path: str = Field(
        description="File path to read (e.g., ~/Documents/test.txt). Use ~ for home directory."
    )


def create_read_file_tool() -> ToolDefinition:
    """Create the read_file tool."""

    async def handler(ctx: ToolContext, input: ReadFileInput) -> dict[str, Any]:
        file_path = ctx.resolve(input.path)
        check_file_size(file_path, READ_FILE_MAX_SIZE_MB)

        content = read_text(file_path)
        text, truncated = truncate_content(content, READ_FILE_MAX_CHARS)
        return {
            "path": file_path,
            "content": text,
            "size": len(content),
            "lines": len(content.split("\n")),
            "truncated": truncated,
        }

    return ToolDefinition(
        name="read_file",
        description="Read the contents of a text file",
        input_model=ReadFileInput,
        handler=handler,
    )


# -- list_directory -----------------------------------------------------------


class ListDirectoryInput(BaseModel):
    """Input schema for the list_directory tool."""

    path: str = Field(
        description=(
            "Directory path (e.g., ~/Documents, ~/Desktop, ~/Downloads). "
            "Use ~ for home directory."
        )
    )


def create_list_directory_tool() -> ToolDefinition:
    """Create the list_directory tool."""

    async def handler(ctx: ToolContext, input: ListDirectoryInput) -> dict[str, Any]:
        dir_path = ctx.resolve(input.path)
        with os.scandir(dir_path) as it:
            entries = sorted(it, key=lambda e: e.name)

        files: list[dict[str, Any]] = []
        directories: list[dict[str, Any]] = []
        for entry in entries[:LIST_DIRECTORY_MAX_ENTRIES]:
            try:
                stats = os.stat(entry.path)
            except OSError as exc:
                # Broken links, permission errors: skip the entry
                logger.debug("Failed to stat %s: %s", entry.path, exc)
                continue

            item = _file_item(entry.name, entry.path, stats)
            if entry.is_dir():
                directories.append(item)
            else:
                files.append(item)

        return {
            "path": dir_path,
            "files": files,
            "directories": directories,
            "total": len(entries),
            "truncated": len(entries) > LIST_DIRECTORY_MAX_ENTRIES,
        }

    return ToolDefinition(
        name="list_directory",
        description="List files and directories",
        input_model=ListDirectoryInput,
        handler=handler,
    )


# -- search_files -------------------------------------------------------------


class SearchFilesInput(BaseModel):
    """Input schema for the search_files tool."""

    pattern: str = Field(description="Search pattern (e.g., *.log, **/*.json)")
    directory: str = Field(
        description=(
            "Directory to search in (e.g., ~/Documents, ~/Desktop). Use ~ for home directory."
        )
    )


def _validate_glob_pattern(pattern: str) -> None:
    if not pattern:
        raise HandlerError("Search pattern is empty")
    pure = PurePath(pattern)
    if pure.is_absolute() or ".." in pure.parts:
        raise HandlerError("Search pattern must be relative and must not contain '..'")


def _find_files(
    directory: str,
    pattern: str,
    limit: int,
    is_blocked: Callable[[str], bool] | None = None,
) -> list[dict[str, Any]]:
    base = Path(directory)
    if not base.is_dir():
        raise HandlerError(f"Not a directory: {directory}")

    # A bare name pattern matches at any depth, like find -name
    if "/" in pattern or "**" in pattern:
        candidates = base.glob(pattern)
    else:
        candidates = base.rglob(pattern)

    def visible(candidate: Path) -> bool:
        # Blocked subtrees nested in the search root stay hidden
        if is_blocked is not None and is_blocked(str(candidate)):
            return False
        return candidate.is_file()

    results: list[dict[str, Any]] = []
    for candidate in itertools.islice(filter(visible, candidates), limit):
        try:
            stats = candidate.stat()
        except OSError:
            continue
        results.append(_file_item(candidate.name, str(candidate), stats))
    return results


def create_search_files_tool() -> ToolDefinition:
    """Create the search_files tool."""

    async def handler(ctx: ToolContext, input: SearchFilesInput) -> dict[str, Any]:
        directory = ctx.resolve(input.directory)
        _validate_glob_pattern(input.pattern)

        try:
            files = await asyncio.wait_for(
                asyncio.to_thread(
                    _find_files,
                    directory,
                    input.pattern,
                    SEARCH_FILES_MAX_RESULTS,
                    ctx.is_blocked,
                ),
                timeout=ctx.command_timeout,
            )
        except asyncio.TimeoutError:
            raise HandlerError(f"Search timed out after {ctx.command_timeout:g}s") from None

        return {
            "pattern": input.pattern,
            "directory": directory,
            "count": len(files),
            "files": files,
        }

    return ToolDefinition(
        name="search_files",
        description="Search for files by name pattern (glob)",
        input_model=SearchFilesInput,
        handler=handler,
    )


# -- get_file_info ------------------------------------------------------------


class GetFileInfoInput(BaseModel):
    """Input schema for the get_file_info tool."""

    path: str = Field(
        description=(
            "File or directory path (e.g., ~/Documents/file.txt). Use ~ for home directory."
        )
    )


def create_get_file_info_tool() -> ToolDefinition:
    """Create the get_file_info tool."""

    async def handler(ctx: ToolContext, input: GetFileInfoInput) -> dict[str, Any]:
        file_path = ctx.resolve(input.path)
        stats = os.stat(file_path)
        created = getattr(stats, "st_birthtime", stats.st_ctime)

        return {
            "path": file_path,
            "name": os.path.basename(file_path),
            "size": stats.st_size,
            "size_formatted": format_file_size(stats.st_size),
            "is_directory": os.path.isdir(file_path),
            "is_file": os.path.isfile(file_path),
            "created": _iso(created),
            "modified": _iso(stats.st_mtime),
            "accessed": _iso(stats.st_atime),
            "permissions": oct(stats.st_mode)[-3:],
        }

    return ToolDefinition(
        name="get_file_info",
        description="Get file metadata (size, dates, permissions)",
        input_model=GetFileInfoInput,
        handler=handler,
    )
