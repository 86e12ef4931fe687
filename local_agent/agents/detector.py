"""Tool-call detection in generated text.

The model requests a tool by replying with a single JSON object of the form
``{"tool": "<name>", "arguments": {...}}``, either inside a ```json fenced
block or on a line of its own. Detection never raises: anything malformed
simply means "no call yet".
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from ..types.types import ToolCall

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*(\{[\s\S]*?\})\s*```")

# Characters that may open a tool call at the start of a line
_CALL_OPENERS = ("{", "`")

_decoder = json.JSONDecoder()


def _as_tool_call(obj: Any) -> ToolCall | None:
    if not isinstance(obj, dict):
        return None
    tool = obj.get("tool")
    arguments = obj.get("arguments")
    if not isinstance(tool, str) or not tool or not isinstance(arguments, dict):
        return None
    return ToolCall(tool=tool, arguments=arguments)


def _detect_fenced(text: str) -> ToolCall | None:
    for match in _FENCED_JSON.finditer(text):
        try:
            obj = json.loads(match.group(1))
        except json.JSONDecodeError:
            continue
        call = _as_tool_call(obj)
        if call is not None:
            return call
    return None


def _detect_bare(text: str) -> ToolCall | None:
    offset = 0
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped.startswith("{") and '"tool"' in stripped:
            start = offset + line.index("{")
            try:
                # Decodes across following lines until the object closes
                obj, _ = _decoder.raw_decode(text, start)
            except json.JSONDecodeError:
                obj = None
            call = _as_tool_call(obj)
            if call is not None:
                return call
        offset += len(line) + 1
    return None


def detect_tool_call(text: str) -> ToolCall | None:
    """Find a tool call in ``text``.

    Fenced ```json blocks are tried first, then bare JSON objects starting a
    line that mention ``"tool"``.

    Returns:
        The first well-formed ToolCall, or None.
    """
    if not text:
        return None
    call = _detect_fenced(text) or _detect_bare(text)
    if call is not None:
        logger.debug("Tool call detected: %s", call.tool)
    return call


class StreamingToolCallDetector:
    """Incremental detector for one generation turn.

    ``feed`` accumulates streamed text and returns the part that is safe to
    show the user right away. Text from the first line that could open a tool
    call is held back until either a call is found (the held text is dropped)
    or the stream ends without one (``finish`` releases it).
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._released = 0
        self._tool_call: ToolCall | None = None

    @property
    def text(self) -> str:
        """Everything fed so far."""
        return self._buffer

    @property
    def detected(self) -> bool:
        return self._tool_call is not None

    @property
    def tool_call(self) -> ToolCall | None:
        return self._tool_call

    def feed(self, chunk: str) -> str:
        self._buffer += chunk
        if self._tool_call is not None:
            return ""

        self._tool_call = detect_tool_call(self._buffer)
        if self._tool_call is not None:
            return ""

        safe_end = max(self._released, self._hold_index())
        released = self._buffer[self._released : safe_end]
        self._released = safe_end
        return released

    def finish(self) -> str:
        """Release held-back text once the stream has ended without a call."""
        if self._tool_call is not None:
            return ""
        released = self._buffer[self._released :]
        self._released = len(self._buffer)
        return released

    def _hold_index(self) -> int:
        position = 0
        for line in self._buffer.split("\n")[:-1]:
            if line.strip().startswith(_CALL_OPENERS):
                return position
            position += len(line) + 1

        # The trailing line is still being written
        partial = self._buffer[position:].strip()
        if not partial or partial.startswith(_CALL_OPENERS):
            return position
        return len(self._buffer)
