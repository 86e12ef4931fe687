"""Shared pytest configuration and fixtures."""

import os

import pytest

from local_agent.llm.engine import GenerationOptions
from local_agent.permissions.evaluator import PermissionEvaluator
from local_agent.permissions.policy import (
    DEFAULT_BLOCKED_EXTENSIONS,
    DEFAULT_SENSITIVE_FILE_PATTERNS,
    PolicyConfig,
)
from local_agent.tools.executor import ToolExecutor
from local_agent.tools.history import ExecutionHistory
from local_agent.tools.registry import create_default_registry


class ScriptedEngine:
    """GenerationEngine test double that replays canned replies in small chunks."""

    def __init__(self, replies, chunk_size=7):
        self.replies = list(replies)
        self.chunk_size = chunk_size
        self.prompts: list[str] = []
        self.options: list[GenerationOptions | None] = []
        self.stopped = False

    async def generate_stream(self, prompt, on_token, options=None):
        self.prompts.append(prompt)
        self.options.append(options)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        for i in range(0, len(reply), self.chunk_size):
            on_token(reply[i : i + self.chunk_size])
        return reply

    def stop_generation(self):
        self.stopped = True


@pytest.fixture
def home_dir(tmp_path):
    """A fake home directory with the default sandbox roots."""
    home = tmp_path / "home"
    for name in ("Documents", "Desktop", "Downloads", ".ssh", "Private"):
        (home / name).mkdir(parents=True)
    return home


@pytest.fixture
def policy(home_dir):
    """Sandbox policy rooted at the fake home directory.

    The default policy blocks /tmp, where pytest keeps tmp_path, so tests use
    an equivalent policy without that entry.
    """
    home = str(home_dir)
    return PolicyConfig(
        home=home,
        allowed_directories=[
            os.path.join(home, "Documents"),
            os.path.join(home, "Desktop"),
            os.path.join(home, "Downloads"),
        ],
        blocked_directories=[
            os.path.join(home, ".ssh"),
            os.path.join(home, ".aws"),
            "/etc",
            "/usr",
        ],
        sensitive_file_patterns=list(DEFAULT_SENSITIVE_FILE_PATTERNS),
        blocked_extensions=list(DEFAULT_BLOCKED_EXTENSIONS),
    )


@pytest.fixture
def evaluator(policy):
    return PermissionEvaluator(policy)


@pytest.fixture
def history():
    return ExecutionHistory()


@pytest.fixture
def executor(evaluator, history):
    """ToolExecutor over the default registry and the fake-home sandbox."""
    return ToolExecutor(create_default_registry(), evaluator, history=history)


@pytest.fixture
def documents(home_dir):
    return home_dir / "Documents"


@pytest.fixture
def make_engine():
    """Factory for ScriptedEngine instances."""

    def _make(*replies, chunk_size=7):
        return ScriptedEngine(replies, chunk_size=chunk_size)

    return _make
