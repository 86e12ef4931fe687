"""Prompt construction for the tool-calling loop."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from ..tools.tool import ToolDefinition

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant running locally on the user's computer. "
    "Answer clearly and concisely."
)

TOOL_CALL_FORMAT = """```json
{
  "tool": "tool_name",
  "arguments": {
    "param1": "value1",
    "param2": "value2"
  }
}
```"""


def build_system_prompt_with_tools(
    base_prompt: str,
    tools: Iterable[ToolDefinition],
    allowed_directories: list[str],
) -> str:
    """Append the tool catalog and calling rules to a system prompt.

    Args:
        base_prompt: The user-configured system prompt
        tools: Tools the model may call
        allowed_directories: Sandbox roots in display form (e.g. ``~/Documents``)

    Returns:
        The full system prompt
    """
    catalog = "\n\n".join(tool.describe() for tool in tools)
    allowed = ", ".join(allowed_directories) or "(none)"
    example = allowed_directories[0] if allowed_directories else "~/Documents"

    return f"""{base_prompt}

## Available Tools

You have access to the following tools to help answer user queries.
To use a tool, respond with a JSON object in this exact format:
{TOOL_CALL_FORMAT}

**IMPORTANT RULES:**
1. Use tools when you need to access files, analyze data, or get system information
2. Always use the exact JSON format above
3. Only use one tool at a time
4. Wait for the tool result before responding to the user
5. After receiving tool results, provide a natural language response to the user

**PATH RULES:**
- ALWAYS use ~ (tilde) for paths in the user's home directory
- Allowed directories: {allowed}
- Example: "Documents folder" -> use path "{example}"
- NEVER use absolute paths like "/Users/.../Documents" or bare names like "Documents"

{catalog}

Remember: only paths inside {allowed} are accessible!"""


def build_tool_result_prompt(tool_name: str, result: Any) -> str:
    """Prompt that feeds a successful tool result back to the model."""
    result_text = json.dumps(result, indent=2, ensure_ascii=False, default=str)
    return (
        f"Tool {tool_name} returned:\n```json\n{result_text}\n```\n\n"
        "Now provide a helpful response to the user based on this information."
    )


def format_tool_error(error: str | None) -> str:
    """Stream text shown to the user when a tool call fails."""
    return f"\n\n❌ Tool execution failed: {error}\n"
