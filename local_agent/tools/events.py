"""Tool execution notifications for an observing UI."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..types.types import ToolEvent, ToolEventType

logger = logging.getLogger(__name__)

ToolEventListener = Callable[[ToolEvent], None]


def emit_tool_event(
    listener: ToolEventListener | None,
    event_type: ToolEventType,
    tool: str,
    arguments: dict[str, Any] | None = None,
    result: Any = None,
    error: str | None = None,
) -> None:
    """Deliver a ToolEvent to the listener, if any.

    Listeners are purely observational: exceptions they raise are logged and
    never reach the tool pipeline.
    """
    if listener is None:
        return
    event = ToolEvent(type=event_type, tool=tool, arguments=arguments, result=result, error=error)
    try:
        listener(event)
    except Exception as e:
        logger.error("Tool event listener failed for %s (%s): %s", tool, event_type, e)
