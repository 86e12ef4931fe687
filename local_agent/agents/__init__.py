"""Agent loop: tool-call detection, orchestration and prompts."""

from .detector import StreamingToolCallDetector, detect_tool_call
from .guard import CancellationToken, SingleFlightGuard
from .orchestrator import DEFAULT_MAX_TURNS, AgentOrchestrator
from .prompts import (
    DEFAULT_SYSTEM_PROMPT,
    build_system_prompt_with_tools,
    build_tool_result_prompt,
    format_tool_error,
)

__all__ = [
    "AgentOrchestrator",
    "DEFAULT_MAX_TURNS",
    "StreamingToolCallDetector",
    "detect_tool_call",
    "SingleFlightGuard",
    "CancellationToken",
    "DEFAULT_SYSTEM_PROMPT",
    "build_system_prompt_with_tools",
    "build_tool_result_prompt",
    "format_tool_error",
]
