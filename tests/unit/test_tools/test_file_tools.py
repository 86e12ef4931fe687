"""Tests for the file tools."""

import os
import time

import pytest

from local_agent.errors import HandlerError, ToolErrorKind
from local_agent.permissions.evaluator import PermissionEvaluator
from local_agent.tools.builtin import files
from local_agent.tools.builtin.files import (
    SearchFilesInput,
    create_search_files_tool,
)
from local_agent.tools.executor import ToolExecutor
from local_agent.tools.output import TRUNCATION_MARKER
from local_agent.tools.registry import create_default_registry
from local_agent.tools.tool import ToolContext


class TestReadFile:
    """Tests for read_file."""

    @pytest.mark.asyncio
    async def test_truncates_long_content(self, executor, documents):
        """60,000 characters come back as 50,000 plus the marker."""
        (documents / "long.txt").write_text("a" * 60_000)

        outcome = await executor.execute_tool_call("read_file", {"path": "~/Documents/long.txt"})

        assert outcome.success is True
        assert outcome.result["truncated"] is True
        assert outcome.result["content"] == "a" * 50_000 + TRUNCATION_MARKER
        assert outcome.result["size"] == 60_000

    @pytest.mark.asyncio
    async def test_keeps_short_content(self, executor, documents):
        """40,000 characters come back unchanged."""
        (documents / "short.txt").write_text("b" * 40_000)

        outcome = await executor.execute_tool_call("read_file", {"path": "~/Documents/short.txt"})

        assert outcome.result["truncated"] is False
        assert len(outcome.result["content"]) == 40_000

    @pytest.mark.asyncio
    async def test_replaces_undecodable_bytes(self, executor, documents):
        """Binary junk does not fail the read."""
        (documents / "mixed.txt").write_bytes(b"ok \xff\xfe end")

        outcome = await executor.execute_tool_call("read_file", {"path": "~/Documents/mixed.txt"})

        assert outcome.success is True
        assert outcome.result["content"].startswith("ok ")


class TestListDirectory:
    """Tests for list_directory."""

    @pytest.mark.asyncio
    async def test_caps_entries_at_500(self, executor, documents):
        """Of 600 entries exactly 500 are considered, split into files and directories."""
        for i in range(550):
            (documents / f"file_{i:04d}.txt").write_text("x")
        for i in range(50):
            (documents / f"zdir_{i:02d}").mkdir()

        outcome = await executor.execute_tool_call("list_directory", {"path": "~/Documents"})

        result = outcome.result
        assert result["total"] == 600
        assert result["truncated"] is True
        assert len(result["files"]) + len(result["directories"]) == 500
        # Sorted by name: the first 500 are all files
        assert len(result["files"]) == 500
        assert result["directories"] == []

    @pytest.mark.asyncio
    async def test_splits_files_and_directories(self, executor, documents):
        (documents / "notes.txt").write_text("hello")
        (documents / "projects").mkdir()

        outcome = await executor.execute_tool_call("list_directory", {"path": "~/Documents"})

        result = outcome.result
        assert result["truncated"] is False
        assert [f["name"] for f in result["files"]] == ["notes.txt"]
        assert [d["name"] for d in result["directories"]] == ["projects"]
        item = result["files"][0]
        assert item["size"] == 5
        assert item["size_formatted"] == "5 B"
        assert item["path"] == os.path.join(str(documents), "notes.txt")
        assert "T" in item["modified"]

    @pytest.mark.asyncio
    async def test_skips_entries_that_cannot_be_statted(self, executor, documents):
        """Broken links are skipped silently."""
        (documents / "real.txt").write_text("x")
        os.symlink(documents / "gone.txt", documents / "broken.txt")

        outcome = await executor.execute_tool_call("list_directory", {"path": "~/Documents"})

        names = [f["name"] for f in outcome.result["files"]]
        assert names == ["real.txt"]
        assert outcome.result["total"] == 2


class TestSearchFiles:
    """Tests for search_files."""

    @pytest.mark.asyncio
    async def test_bare_pattern_matches_recursively(self, executor, documents):
        (documents / "a.log").write_text("x")
        (documents / "nested").mkdir()
        (documents / "nested" / "b.log").write_text("x")
        (documents / "c.txt").write_text("x")

        outcome = await executor.execute_tool_call(
            "search_files", {"pattern": "*.log", "directory": "~/Documents"}
        )

        assert outcome.success is True
        assert sorted(f["name"] for f in outcome.result["files"]) == ["a.log", "b.log"]
        assert outcome.result["count"] == 2

    @pytest.mark.asyncio
    async def test_skips_blocked_subtree(self, policy, history, documents):
        """A blocked root nested in the searched directory stays hidden."""
        vault = documents / "vault"
        vault.mkdir()
        (vault / "plan.txt").write_text("x")
        (documents / "notes.txt").write_text("x")
        policy.blocked_directories.append(str(vault))
        executor = ToolExecutor(create_default_registry(), PermissionEvaluator(policy), history)

        direct = await executor.execute_tool_call("list_directory", {"path": "~/Documents/vault"})
        outcome = await executor.execute_tool_call(
            "search_files", {"pattern": "*.txt", "directory": "~/Documents"}
        )

        assert direct.success is False
        assert outcome.success is True
        assert [f["name"] for f in outcome.result["files"]] == ["notes.txt"]

    @pytest.mark.asyncio
    async def test_pattern_with_separator_is_anchored(self, executor, documents):
        (documents / "a.json").write_text("{}")
        (documents / "sub").mkdir()
        (documents / "sub" / "b.json").write_text("{}")

        outcome = await executor.execute_tool_call(
            "search_files", {"pattern": "sub/*.json", "directory": "~/Documents"}
        )

        assert [f["name"] for f in outcome.result["files"]] == ["b.json"]

    @pytest.mark.asyncio
    async def test_results_are_capped(self, executor, documents):
        for i in range(120):
            (documents / f"f{i}.csv").write_text("x")

        outcome = await executor.execute_tool_call(
            "search_files", {"pattern": "*.csv", "directory": "~/Documents"}
        )

        assert outcome.result["count"] == 100

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pattern", ["../*.txt", "/etc/*", "a/../../b"])
    async def test_rejects_escaping_patterns(self, executor, pattern):
        """Patterns cannot climb out of the approved directory."""
        outcome = await executor.execute_tool_call(
            "search_files", {"pattern": pattern, "directory": "~/Documents"}
        )
        assert outcome.success is False
        assert outcome.error_kind == ToolErrorKind.HANDLER_FAILURE

    @pytest.mark.asyncio
    async def test_search_times_out(self, documents, monkeypatch):
        """The directory walk is bounded by the command timeout."""

        def slow(*args):
            time.sleep(0.5)
            return []

        monkeypatch.setattr(files, "_find_files", slow)
        tool = create_search_files_tool()
        ctx = ToolContext(home=str(documents.parent), command_timeout=0.05)

        with pytest.raises(HandlerError, match="timed out"):
            await tool.handler(ctx, SearchFilesInput(pattern="*", directory="~/Documents"))


class TestGetFileInfo:
    """Tests for get_file_info."""

    @pytest.mark.asyncio
    async def test_reports_metadata(self, executor, documents):
        path = documents / "report.txt"
        path.write_text("12345")
        os.chmod(path, 0o640)

        outcome = await executor.execute_tool_call(
            "get_file_info", {"path": "~/Documents/report.txt"}
        )

        info = outcome.result
        assert info["name"] == "report.txt"
        assert info["size"] == 5
        assert info["is_file"] is True
        assert info["is_directory"] is False
        assert info["permissions"] == "640"
        for key in ("created", "modified", "accessed"):
            assert info[key]

    @pytest.mark.asyncio
    async def test_directory(self, executor):
        outcome = await executor.execute_tool_call("get_file_info", {"path": "~/Documents"})
        assert outcome.result["is_directory"] is True
