__version__ = "0.1.0"

# Agent loop
from .agents import (
    AgentOrchestrator,
    CancellationToken,
    SingleFlightGuard,
    StreamingToolCallDetector,
    detect_tool_call,
)

# Errors
from .errors import (
    GenerationBusyError,
    GenerationCancelledError,
    GenerationError,
    HandlerError,
    LocalAgentError,
    PermissionDeniedError,
    SizeLimitExceededError,
    ToolError,
    ToolErrorKind,
    UnknownToolError,
)

# Generation engines
from .llm import GenerationEngine, GenerationOptions, OllamaEngine

# Facade
from .local_agent import LocalAgent

# Sandbox
from .permissions import OperationClass, PermissionEvaluator, PolicyConfig, default_policy_config

# Tools
from .tools import (
    ExecutionHistory,
    ToolContext,
    ToolDefinition,
    ToolExecutor,
    ToolParameter,
    ToolRegistry,
    create_default_registry,
)
from .types import (
    AgentRunResult,
    AgentRunStatus,
    AgentTurn,
    ExecutionRecord,
    PermissionDecision,
    ToolCall,
    ToolEvent,
    ToolOutcome,
)
from .utils import Settings, load_settings

__all__ = [
    "__version__",
    "LocalAgent",
    "AgentOrchestrator",
    "StreamingToolCallDetector",
    "detect_tool_call",
    "SingleFlightGuard",
    "CancellationToken",
    "GenerationEngine",
    "GenerationOptions",
    "OllamaEngine",
    "PermissionEvaluator",
    "PolicyConfig",
    "OperationClass",
    "default_policy_config",
    "ToolDefinition",
    "ToolParameter",
    "ToolContext",
    "ToolRegistry",
    "ToolExecutor",
    "ExecutionHistory",
    "create_default_registry",
    "ToolCall",
    "ToolOutcome",
    "ToolEvent",
    "PermissionDecision",
    "ExecutionRecord",
    "AgentTurn",
    "AgentRunStatus",
    "AgentRunResult",
    "Settings",
    "load_settings",
    "LocalAgentError",
    "ToolError",
    "ToolErrorKind",
    "PermissionDeniedError",
    "UnknownToolError",
    "SizeLimitExceededError",
    "HandlerError",
    "GenerationError",
    "GenerationBusyError",
    "GenerationCancelledError",
]
