"""Tests for ToolRegistry and ToolDefinition."""

import pytest
from pydantic import BaseModel, Field

from local_agent.tools.registry import ToolRegistry, create_default_registry
from local_agent.tools.tool import ToolDefinition


class EchoInput(BaseModel):
    text: str = Field(description="Text to echo")
    repeat: int | None = Field(default=None, description="How many times")


async def _echo(ctx, input):
    return {"text": input.text * (input.repeat or 1)}


def _echo_tool():
    return ToolDefinition(
        name="echo", description="Echo text back", input_model=EchoInput, handler=_echo
    )


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_default_registry_has_nine_tools(self):
        """The default catalog holds exactly the nine read-only tools."""
        registry = create_default_registry()
        assert registry.names() == [
            "read_file",
            "list_directory",
            "search_files",
            "get_file_info",
            "get_disk_usage",
            "analyze_logs",
            "list_processes",
            "analyze_json",
            "analyze_csv",
        ]
        assert len(registry) == 9
        assert "read_file" in registry
        assert "write_file" not in registry

    def test_register_and_get(self):
        registry = ToolRegistry()
        tool = _echo_tool()
        registry.register(tool)
        assert registry.get("echo") is tool
        assert registry.get("missing") is None
        assert registry.list_tools() == [tool]

    def test_duplicate_names_are_rejected(self):
        """A name can only be registered once."""
        registry = ToolRegistry([_echo_tool()])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_echo_tool())


class TestToolDefinition:
    """Tests for ToolDefinition schema rendering."""

    def test_parameters_follow_input_model(self):
        """Parameters keep field order, type, optionality and description."""
        params = _echo_tool().parameters
        assert list(params) == ["text", "repeat"]
        assert params["text"].type == "string"
        assert params["text"].optional is False
        assert params["text"].description == "Text to echo"
        assert params["repeat"].type == "integer"
        assert params["repeat"].optional is True

    def test_describe(self):
        """The catalog entry lists every parameter."""
        text = _echo_tool().describe()
        assert text.splitlines()[0] == "### echo"
        assert "  - text (string): Text to echo" in text
        assert "  - repeat (integer) (optional): How many times" in text

    def test_describe_without_parameters(self):
        """Tools without parameters say so."""
        tool = create_default_registry().get("list_processes")
        assert "(none)" in tool.describe()

    def test_to_llm_tool_definition(self):
        """Function-calling format wraps the JSON schema."""
        definition = _echo_tool().to_llm_tool_definition()
        assert definition["type"] == "function"
        assert definition["function"]["name"] == "echo"
        assert definition["function"]["parameters"]["required"] == ["text"]
