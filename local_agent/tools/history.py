"""Bounded audit log of tool attempts."""

from __future__ import annotations

import copy
from collections import deque
from typing import Any

from ..types.types import ExecutionRecord

HISTORY_CAPACITY = 100
DEFAULT_RECENT_LIMIT = 50


class ExecutionHistory:
    """Newest-first record of tool attempts, evicting the oldest past capacity."""

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        self._records: deque[ExecutionRecord] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._records.maxlen or HISTORY_CAPACITY

    def append(self, record: ExecutionRecord) -> None:
        self._records.appendleft(record)

    def record(
        self,
        tool: str,
        arguments: dict[str, Any] | None,
        success: bool,
        result: Any = None,
        error: str | None = None,
    ) -> ExecutionRecord:
        """Build a record with private copies of the arguments and result and append it."""
        entry = ExecutionRecord(
            tool=tool,
            arguments=copy.deepcopy(arguments or {}),
            result=copy.deepcopy(result) if success else None,
            error=None if success else error,
            success=success,
        )
        self.append(entry)
        return entry

    def recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[ExecutionRecord]:
        """Return at most ``limit`` records, newest first."""
        if limit <= 0:
            return []
        return list(self._records)[:limit]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
