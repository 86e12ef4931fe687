"""Exception types raised inside the agent and tool layers.

Handlers, the tool executor and the generation engine raise these. The tool
executor converts tool errors to structured results before they reach a
caller; the permission evaluator never raises.
"""

from __future__ import annotations

from enum import Enum


class ToolErrorKind(str, Enum):
    """Failure categories reported on a ToolOutcome."""

    PERMISSION_DENIED = "permission_denied"
    UNKNOWN_TOOL = "unknown_tool"
    SIZE_LIMIT_EXCEEDED = "size_limit_exceeded"
    INVALID_ARGUMENTS = "invalid_arguments"
    HANDLER_FAILURE = "handler_failure"


class LocalAgentError(Exception):
    """Base class for all local-agent errors."""


class ToolError(LocalAgentError):
    """An error raised while handling a tool call."""

    kind: ToolErrorKind = ToolErrorKind.HANDLER_FAILURE


class PermissionDeniedError(ToolError):
    """The permission evaluator refused the call."""

    kind = ToolErrorKind.PERMISSION_DENIED

    def __init__(self, reason: str) -> None:
        super().__init__(f"Permission denied: {reason}")
        self.reason = reason


class UnknownToolError(ToolError):
    kind = ToolErrorKind.UNKNOWN_TOOL

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class SizeLimitExceededError(ToolError):
    kind = ToolErrorKind.SIZE_LIMIT_EXCEEDED


class HandlerError(ToolError):
    """I/O, parse or subprocess failure inside a tool handler."""

    kind = ToolErrorKind.HANDLER_FAILURE


class GenerationError(LocalAgentError):
    """The generation engine failed to produce output."""


class GenerationBusyError(GenerationError):
    """A generation was requested while another one is in flight."""


class GenerationCancelledError(GenerationError):
    """The generation was stopped through its cancellation token."""
