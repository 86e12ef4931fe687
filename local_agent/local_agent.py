"""LocalAgent facade -- wires the sandbox, tools, engine and agent loop together."""

import logging
from typing import Any

from .agents.orchestrator import AgentOrchestrator
from .llm.engine import GenerationEngine, GenerationOptions, TokenCallback
from .llm.ollama import OllamaEngine
from .permissions.evaluator import PermissionEvaluator
from .permissions.policy import PolicyConfig, default_policy_config
from .tools.events import ToolEventListener
from .tools.executor import ToolExecutor
from .tools.history import DEFAULT_RECENT_LIMIT, ExecutionHistory
from .tools.registry import ToolRegistry, create_default_registry
from .tools.tool import ToolDefinition
from .types.types import AgentRunResult, ExecutionRecord, ToolOutcome
from .utils.config import Settings, is_localhost_url, load_settings

logger = logging.getLogger(__name__)


def _configure_file_logging(log_file: str) -> None:
    """Redirect all local-agent logs to a file instead of stdout/stderr."""
    handler = logging.FileHandler(log_file, mode="a")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
    # Configure root logger so all loggers (local_agent.*, httpx, etc.) use the file
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)


class LocalAgent:
    """Host-facing API for a sandboxed, tool-calling local model.

    Usage::

        from local_agent import LocalAgent

        agent = LocalAgent()

        # Direct tool call, bypassing the model
        outcome = await agent.execute_tool_call("list_directory", {"path": "~/Documents"})

        # Chat with tool calling
        result = await agent.chat("What is in my Downloads folder?", on_token=print)
        print(result.status, result.response)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        engine: GenerationEngine | None = None,
        policy: PolicyConfig | None = None,
        registry: ToolRegistry | None = None,
        on_tool_event: ToolEventListener | None = None,
        log_file: str | None = None,
    ):
        self.settings = settings or load_settings()

        log_file = log_file or self.settings.log_file
        if log_file:
            _configure_file_logging(log_file)

        if engine is None:
            if not is_localhost_url(self.settings.ollama_host):
                logger.warning(
                    "Ollama host %s is not local; prompts and tool results leave this machine",
                    self.settings.ollama_host,
                )
            engine = OllamaEngine(model=self.settings.model, host=self.settings.ollama_host)
        self.engine = engine

        self.evaluator = PermissionEvaluator(
            policy
            or default_policy_config(extra_allowed_directories=self.settings.allowed_directories)
        )
        self.history = ExecutionHistory()
        self.executor = ToolExecutor(
            registry or create_default_registry(),
            self.evaluator,
            history=self.history,
            on_event=on_tool_event,
            command_timeout=self.settings.command_timeout,
        )
        self.orchestrator = AgentOrchestrator(
            engine,
            self.executor,
            max_turns=self.settings.max_turns,
            system_prompt=self.settings.system_prompt,
        )

    # ── Tools ──

    async def execute_tool_call(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> ToolOutcome:
        return await self.executor.execute_tool_call(name, arguments)

    def list_tools(self) -> list[ToolDefinition]:
        return self.executor.registry.list_tools()

    def get_history(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[ExecutionRecord]:
        return self.history.recent(limit)

    # ── Chat ──

    async def chat(
        self,
        message: str,
        on_token: TokenCallback | None = None,
        options: GenerationOptions | None = None,
    ) -> AgentRunResult:
        """Answer a message, letting the model call tools when enabled."""
        options = options or GenerationOptions(
            temperature=self.settings.temperature, max_tokens=self.settings.max_tokens
        )
        return await self.orchestrator.run(message, on_token, options=options)

    def stop(self) -> None:
        self.orchestrator.stop()

    @property
    def tools_enabled(self) -> bool:
        return self.orchestrator.tools_enabled

    def enable_tools(self) -> None:
        self.orchestrator.tools_enabled = True

    def disable_tools(self) -> None:
        self.orchestrator.tools_enabled = False

    # ── Policy ──

    def add_allowed_directory(self, directory: str) -> str:
        return self.evaluator.add_allowed_directory(directory)

    def remove_allowed_directory(self, directory: str) -> bool:
        return self.evaluator.remove_allowed_directory(directory)

    def get_policy(self) -> PolicyConfig:
        return self.evaluator.get_config()

    async def close(self) -> None:
        close = getattr(self.engine, "close", None)
        if callable(close):
            await close()
