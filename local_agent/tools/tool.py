"""Tool definitions that can be called by the agent."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from ..permissions.security import find_containing_root, resolve_path

# Default timeout for handlers that shell out or walk directory trees
DEFAULT_COMMAND_TIMEOUT_SECONDS = 30


@dataclass
class ToolContext:
    """Per-call context handed to tool handlers."""

    home: str
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS
    blocked_directories: list[str] = field(default_factory=list)

    def resolve(self, path: str) -> str:
        """Resolve a tool path with the same rules as the permission evaluator."""
        return resolve_path(path, self.home)

    def is_blocked(self, path: str) -> bool:
        """Whether ``path`` lies under a blocked root (for paths a handler discovers)."""
        resolved = resolve_path(path, self.home)
        return find_containing_root(resolved, self.blocked_directories) is not None


ToolHandler = Callable[[ToolContext, Any], Awaitable[dict[str, Any]]]


class ToolParameter(BaseModel):
    """One entry of a tool's parameter schema."""

    type: str
    optional: bool = False
    description: str = ""


def _schema_type(prop: dict[str, Any]) -> str:
    if "type" in prop:
        return prop["type"]
    # Optional fields are rendered as anyOf [{type: X}, {type: null}]
    for option in prop.get("anyOf", []):
        if option.get("type") and option["type"] != "null":
            return option["type"]
    return "string"


@dataclass(frozen=True)
class ToolDefinition:
    """A registered tool: name, description, argument model and handler.

    The handler receives a ToolContext and an instance of ``input_model``.
    """

    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler

    @property
    def parameters(self) -> dict[str, ToolParameter]:
        """Ordered parameter schema derived from the input model."""
        schema = self.input_model.model_json_schema()
        required = set(schema.get("required", []))
        return {
            name: ToolParameter(
                type=_schema_type(prop),
                optional=name not in required,
                description=prop.get("description", ""),
            )
            for name, prop in schema.get("properties", {}).items()
        }

    def to_llm_tool_definition(self) -> dict[str, Any]:
        """
        Convert tool to LLM function calling format.

        Returns format compatible with OpenAI/Ollama function calling:
        {
            "type": "function",
            "function": {
                "name": "tool_name",
                "description": "...",
                "parameters": {...}
            }
        }
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(),
            },
        }

    def describe(self) -> str:
        """Render the tool as a text block for the system prompt."""
        lines = [f"### {self.name}", self.description, "Parameters:"]
        params = self.parameters
        if not params:
            lines.append("  (none)")
        for name, param in params.items():
            optional = " (optional)" if param.optional else ""
            lines.append(f"  - {name} ({param.type}){optional}: {param.description}")
        return "\n".join(lines)
