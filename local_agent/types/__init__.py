from .types import (
    AgentRunResult,
    AgentRunStatus,
    AgentTurn,
    ExecutionRecord,
    PermissionDecision,
    ToolCall,
    ToolEvent,
    ToolEventType,
    ToolOutcome,
)

__all__ = [
    "AgentRunResult",
    "AgentRunStatus",
    "AgentTurn",
    "ExecutionRecord",
    "PermissionDecision",
    "ToolCall",
    "ToolEvent",
    "ToolEventType",
    "ToolOutcome",
]
