"""Type definitions for tool calls, permission decisions, history and agent runs."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import ToolErrorKind


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ToolCall(BaseModel):
    """A tool invocation requested by the model (or by a direct caller)."""

    tool: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class PermissionDecision(BaseModel):
    """Allow/deny verdict for one tool invocation."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: str | None = None

    @model_validator(mode="after")
    def _reason_required_when_denied(self) -> "PermissionDecision":
        if not self.allowed and not self.reason:
            raise ValueError("A denied PermissionDecision requires a reason")
        return self

    @classmethod
    def allow(cls) -> "PermissionDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "PermissionDecision":
        return cls(allowed=False, reason=reason)


class ToolOutcome(BaseModel):
    """Structured result of ToolExecutor.execute()."""

    success: bool
    result: Any | None = None
    error: str | None = None
    error_kind: ToolErrorKind | None = None

    @classmethod
    def ok(cls, result: Any) -> "ToolOutcome":
        return cls(success=True, result=result)

    @classmethod
    def failure(cls, error: str, kind: ToolErrorKind) -> "ToolOutcome":
        return cls(success=False, error=error, error_kind=kind)


class ExecutionRecord(BaseModel):
    """One audited tool attempt. Never mutated after insertion."""

    model_config = ConfigDict(frozen=True)

    tool: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    result: Any | None = None
    error: str | None = None
    success: bool
    timestamp: datetime = Field(default_factory=_utcnow)


ToolEventType = Literal["tool-started", "tool-completed", "tool-failed"]


class ToolEvent(BaseModel):
    """Notification emitted around tool execution for an observing UI."""

    type: ToolEventType
    tool: str
    arguments: dict[str, Any] | None = None
    result: Any | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)


class AgentTurn(BaseModel):
    """State of one orchestrator iteration (generation + at most one tool call)."""

    index: int
    text: str = ""
    has_tool_call: bool = False
    tool_call: ToolCall | None = None


class AgentRunStatus(str, Enum):
    """Terminal states of an agent run."""

    COMPLETED = "completed"
    FAILED = "failed"
    TURN_LIMIT = "turn_limit"
    BUSY = "busy"
    CANCELLED = "cancelled"


class AgentRunResult(BaseModel):
    """Final result of AgentOrchestrator.run()."""

    status: AgentRunStatus
    response: str = ""
    turns: int = 0
    tool_calls: list[ToolCall] = []
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == AgentRunStatus.COMPLETED
