"""Bounded subprocess execution for tool handlers.

Commands run without a shell, under a timeout, and with a cap on the amount
of stdout kept in memory. stderr is discarded.
"""

from __future__ import annotations

import asyncio
import logging
import time

from pydantic import BaseModel, Field

from ..errors import HandlerError
from .tool import DEFAULT_COMMAND_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

# Default maximum stdout bytes kept from a command
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024

_READ_CHUNK_BYTES = 64 * 1024


class CommandResult(BaseModel):
    """Result of a bounded command execution."""

    exit_code: int = Field(description="Process exit code (0 = success)")
    stdout: str = Field(description="Standard output, possibly truncated")
    duration_ms: int = Field(description="Execution duration in milliseconds")
    truncated: bool = Field(description="Whether stdout hit the output cap")


def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        # Already exited
        pass


async def _read_bounded(stream: asyncio.StreamReader, max_bytes: int) -> tuple[bytes, bool]:
    buffer = bytearray()
    while True:
        chunk = await stream.read(_READ_CHUNK_BYTES)
        if not chunk:
            return bytes(buffer), False
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            return bytes(buffer[:max_bytes]), True


async def run_command(
    argv: list[str],
    timeout: float | None = None,
    max_output_bytes: int | None = None,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a command via asyncio subprocess.

    Args:
        argv: Program and arguments (no shell interpretation).
        timeout: Timeout in seconds (default: 30).
        max_output_bytes: Maximum stdout bytes to keep (default: 10 MB).
        cwd: Working directory.

    Returns:
        CommandResult with decoded stdout.

    Raises:
        HandlerError: If the program is missing or the timeout is exceeded.
    """
    timeout_seconds = timeout if timeout is not None else DEFAULT_COMMAND_TIMEOUT_SECONDS
    max_bytes = max_output_bytes or DEFAULT_MAX_OUTPUT_BYTES
    start = time.monotonic()

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError as exc:
        raise HandlerError(f"Command not found: {argv[0]}") from exc

    try:
        stdout_bytes, truncated = await asyncio.wait_for(
            _read_bounded(proc.stdout, max_bytes), timeout=timeout_seconds
        )
    except asyncio.TimeoutError:
        _kill(proc)
        await proc.wait()
        raise HandlerError(
            f"Command timed out after {timeout_seconds:g}s: {argv[0]}"
        ) from None

    if truncated:
        logger.warning("Output of %s exceeded %d bytes, process killed", argv[0], max_bytes)
        _kill(proc)
    await proc.wait()

    return CommandResult(
        exit_code=proc.returncode if proc.returncode is not None else 1,
        stdout=stdout_bytes.decode("utf-8", errors="replace"),
        duration_ms=int((time.monotonic() - start) * 1000),
        truncated=truncated,
    )
