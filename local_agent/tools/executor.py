"""Tool executor -- permission-gated dispatch of tool calls to their handlers.

Every attempt, allowed or not, ends up in the ExecutionHistory. ``execute``
never raises: unknown tools, denials, invalid arguments and handler
exceptions all come back as a failed ToolOutcome.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..errors import PermissionDeniedError, ToolError, ToolErrorKind, UnknownToolError
from ..permissions.evaluator import PermissionEvaluator
from ..types.types import ToolCall, ToolOutcome
from .events import ToolEventListener, emit_tool_event
from .history import ExecutionHistory
from .registry import ToolRegistry
from .tool import DEFAULT_COMMAND_TIMEOUT_SECONDS, ToolContext, ToolDefinition

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Runs tool calls after the permission evaluator approves them."""

    def __init__(
        self,
        registry: ToolRegistry,
        evaluator: PermissionEvaluator,
        history: ExecutionHistory | None = None,
        on_event: ToolEventListener | None = None,
        command_timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS,
    ) -> None:
        self.registry = registry
        self.evaluator = evaluator
        self.history = history if history is not None else ExecutionHistory()
        self.on_event = on_event
        self.command_timeout = command_timeout

    async def execute_tool_call(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> ToolOutcome:
        return await self.execute(ToolCall(tool=name, arguments=arguments or {}))

    async def execute(self, call: ToolCall) -> ToolOutcome:
        """Execute one tool call.

        Args:
            call: The tool name and arguments.

        Returns:
            ToolOutcome with the handler result or a categorised error.
        """
        name, arguments = call.tool, call.arguments
        logger.info("Executing tool %s with arguments %s", name, arguments)

        try:
            tool = self.authorize(name, arguments)
        except UnknownToolError as e:
            self.history.record(name, arguments, success=False, error=str(e))
            return ToolOutcome.failure(str(e), e.kind)
        except PermissionDeniedError as e:
            logger.warning("Permission denied for %s: %s", name, e.reason)
            self.history.record(name, arguments, success=False, error=e.reason)
            return ToolOutcome.failure(str(e), e.kind)

        emit_tool_event(self.on_event, "tool-started", name, arguments=arguments)
        outcome = await self._run_handler(tool, call)

        self.history.record(
            name, arguments, success=outcome.success, result=outcome.result, error=outcome.error
        )
        if outcome.success:
            emit_tool_event(self.on_event, "tool-completed", name, result=outcome.result)
        else:
            emit_tool_event(self.on_event, "tool-failed", name, error=outcome.error)
        return outcome

    def authorize(self, name: str, arguments: dict[str, Any] | None) -> ToolDefinition:
        """Look up a tool and check the call against the sandbox policy.

        Raises:
            UnknownToolError: If no tool is registered under ``name``.
            PermissionDeniedError: If the evaluator denies the call.
        """
        tool = self.registry.get(name)
        if tool is None:
            raise UnknownToolError(name)

        decision = self.evaluator.evaluate(name, arguments)
        if not decision.allowed:
            raise PermissionDeniedError(decision.reason or "denied")
        return tool

    async def _run_handler(self, tool: ToolDefinition, call: ToolCall) -> ToolOutcome:
        try:
            input_obj = tool.input_model.model_validate(call.arguments)
        except ValidationError as e:
            return ToolOutcome.failure(
                f"Invalid arguments for {call.tool}: {e}", ToolErrorKind.INVALID_ARGUMENTS
            )

        ctx = ToolContext(
            home=self.evaluator.home,
            command_timeout=self.command_timeout,
            blocked_directories=self.evaluator.blocked_directories,
        )
        try:
            result = await tool.handler(ctx, input_obj)
        except ToolError as e:
            logger.error("Tool %s failed: %s", call.tool, e)
            return ToolOutcome.failure(str(e), e.kind)
        except Exception as e:
            logger.error("Tool %s failed: %s", call.tool, e)
            return ToolOutcome.failure(str(e) or type(e).__name__, ToolErrorKind.HANDLER_FAILURE)

        logger.info("Tool %s executed successfully", call.tool)
        return ToolOutcome.ok(result)
