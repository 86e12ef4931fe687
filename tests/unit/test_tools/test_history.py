"""Tests for ExecutionHistory."""

import pytest
from pydantic import ValidationError

from local_agent.tools.history import HISTORY_CAPACITY, ExecutionHistory


class TestExecutionHistory:
    """Tests for ExecutionHistory."""

    def test_newest_first(self):
        history = ExecutionHistory()
        history.record("read_file", {"path": "a"}, success=True, result={"ok": 1})
        history.record("read_file", {"path": "b"}, success=False, error="boom")

        records = history.recent()
        assert [r.arguments["path"] for r in records] == ["b", "a"]
        assert records[0].success is False
        assert records[0].error == "boom"
        assert records[0].result is None
        assert records[1].result == {"ok": 1}

    def test_capacity_evicts_oldest(self):
        """Never more than 100 entries; the oldest go first."""
        history = ExecutionHistory()
        for i in range(HISTORY_CAPACITY + 25):
            history.record("get_file_info", {"i": i}, success=True)

        assert len(history) == HISTORY_CAPACITY
        records = history.recent(limit=HISTORY_CAPACITY)
        assert records[0].arguments["i"] == HISTORY_CAPACITY + 24
        assert records[-1].arguments["i"] == 25

    def test_recent_limit(self):
        """recent() defaults to 50 and honours smaller limits."""
        history = ExecutionHistory()
        for i in range(80):
            history.record("t", {"i": i}, success=True)
        assert len(history.recent()) == 50
        assert len(history.recent(5)) == 5
        assert history.recent(0) == []

    def test_arguments_are_copied(self):
        """Later mutation of the caller's arguments does not leak in."""
        history = ExecutionHistory()
        args = {"path": "~/Documents", "nested": {"a": 1}}
        history.record("list_directory", args, success=True)
        args["nested"]["a"] = 2
        assert history.recent()[0].arguments["nested"]["a"] == 1

    def test_result_is_copied(self):
        """Mutating the result handed back to the caller leaves the record intact."""
        history = ExecutionHistory()
        result = {"content": "hello", "lines": [1]}
        history.record("read_file", {"path": "a"}, success=True, result=result)
        result["content"] = "changed"
        result["lines"].append(2)

        stored = history.recent(1)[0].result
        assert stored == {"content": "hello", "lines": [1]}

    def test_records_are_frozen(self):
        history = ExecutionHistory()
        record = history.record("t", {}, success=True)
        with pytest.raises(ValidationError):
            record.success = False

    def test_clear(self):
        history = ExecutionHistory()
        history.record("t", {}, success=True)
        history.clear()
        assert len(history) == 0
