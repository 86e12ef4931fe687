"""Tool definitions, registry, executor and audit history."""

from .events import ToolEventListener, emit_tool_event
from .executor import ToolExecutor
from .history import HISTORY_CAPACITY, ExecutionHistory
from .output import format_file_size, parse_size_to_bytes, truncate_content
from .process import CommandResult, run_command
from .registry import ToolRegistry, create_default_registry
from .tool import ToolContext, ToolDefinition, ToolParameter

__all__ = [
    "ToolDefinition",
    "ToolParameter",
    "ToolContext",
    "ToolRegistry",
    "create_default_registry",
    "ToolExecutor",
    "ExecutionHistory",
    "HISTORY_CAPACITY",
    "ToolEventListener",
    "emit_tool_event",
    "CommandResult",
    "run_command",
    "format_file_size",
    "parse_size_to_bytes",
    "truncate_content",
]
