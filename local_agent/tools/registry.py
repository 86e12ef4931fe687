"""Tool registry -- maps tool names to their definitions."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .builtin import (
    create_analyze_csv_tool,
    create_analyze_json_tool,
    create_analyze_logs_tool,
    create_get_disk_usage_tool,
    create_get_file_info_tool,
    create_list_directory_tool,
    create_list_processes_tool,
    create_read_file_tool,
    create_search_files_tool,
)
from .tool import ToolDefinition

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Name-keyed collection of ToolDefinitions, in registration order."""

    def __init__(self, tools: list[ToolDefinition] | None = None) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: ToolDefinition) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool
        logger.debug("Registered tool %s", tool.name)

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def list_tools(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())


def create_default_registry() -> ToolRegistry:
    """Create a registry holding the nine built-in read-only tools."""
    return ToolRegistry(
        [
            create_read_file_tool(),
            create_list_directory_tool(),
            create_search_files_tool(),
            create_get_file_info_tool(),
            create_get_disk_usage_tool(),
            create_analyze_logs_tool(),
            create_list_processes_tool(),
            create_analyze_json_tool(),
            create_analyze_csv_tool(),
        ]
    )
