import asyncio
import json
import sys
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from local_agent.local_agent import LocalAgent
from local_agent.types.types import AgentRunStatus

console = Console()


def parse_tool_arguments(pairs: tuple[str, ...], raw_json: str | None) -> dict[str, Any]:
    """Merge ``--json`` and ``--arg key=value`` options into one argument dict."""
    arguments: dict[str, Any] = {}
    if raw_json:
        try:
            decoded = json.loads(raw_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--json") from e
        if not isinstance(decoded, dict):
            raise click.BadParameter("Expected a JSON object", param_hint="--json")
        arguments.update(decoded)

    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--arg")
        arguments[key.strip()] = value
    return arguments


@click.group()
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to this file")
@click.pass_context
def main(ctx: click.Context, log_file: str | None) -> None:
    """Sandboxed local agent with read-only system tools."""
    ctx.ensure_object(dict)
    ctx.obj["log_file"] = log_file


def _agent(ctx: click.Context) -> LocalAgent:
    return LocalAgent(log_file=ctx.obj.get("log_file"))


@main.command("tools")
@click.pass_context
def list_tools(ctx: click.Context) -> None:
    """List the available tools."""
    table = Table(title="Available tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Parameters", style="dim")

    for tool in _agent(ctx).list_tools():
        params = ", ".join(
            f"{name}{'?' if param.optional else ''}: {param.type}"
            for name, param in tool.parameters.items()
        )
        table.add_row(tool.name, tool.description, params or "-")
    console.print(table)


@main.command("call")
@click.argument("tool_name")
@click.option("--arg", "pairs", multiple=True, help="Tool argument as key=value")
@click.option("--json", "raw_json", help="Tool arguments as a JSON object")
@click.pass_context
def call_tool(
    ctx: click.Context, tool_name: str, pairs: tuple[str, ...], raw_json: str | None
) -> None:
    """Execute a single tool call through the permission sandbox."""
    arguments = parse_tool_arguments(pairs, raw_json)
    outcome = asyncio.run(_agent(ctx).execute_tool_call(tool_name, arguments))

    if not outcome.success:
        console.print(f"[red]{outcome.error}[/red]")
        raise SystemExit(1)
    console.print_json(json.dumps(outcome.result, ensure_ascii=False, default=str))


@main.command("policy")
@click.pass_context
def show_policy(ctx: click.Context) -> None:
    """Show the sandbox policy."""
    agent = _agent(ctx)
    policy = agent.get_policy()

    def display(paths: list[str]) -> str:
        return "\n".join(f"  {agent.evaluator.format_for_display(p)}" for p in paths) or "  -"

    console.print(
        Panel(
            f"[bold]Allowed directories[/bold]\n{display(policy.allowed_directories)}\n\n"
            f"[bold]Blocked directories[/bold]\n{display(policy.blocked_directories)}\n\n"
            f"[bold]Sensitive file patterns[/bold]\n  "
            f"{', '.join(policy.sensitive_file_patterns)}\n\n"
            f"[bold]Blocked extensions[/bold]\n  {', '.join(policy.blocked_extensions)}",
            title="Sandbox policy",
            border_style="blue",
        )
    )


@main.command("chat")
@click.argument("message")
@click.option("--no-tools", is_flag=True, help="Answer without calling tools")
@click.pass_context
def chat(ctx: click.Context, message: str, no_tools: bool) -> None:
    """Send one message to the model and stream the answer."""
    agent = _agent(ctx)
    if no_tools:
        agent.disable_tools()

    def on_token(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    async def run():
        try:
            return await agent.chat(message, on_token=on_token)
        finally:
            await agent.close()

    result = asyncio.run(run())
    sys.stdout.write("\n")

    if result.tool_calls:
        used = ", ".join(call.tool for call in result.tool_calls)
        console.print(f"[dim]Tools used: {used}[/dim]")
    if result.status == AgentRunStatus.TURN_LIMIT:
        console.print("[yellow]Stopped after reaching the tool-call limit.[/yellow]")
    elif result.status == AgentRunStatus.FAILED and result.error:
        console.print(f"[red]{result.error}[/red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
