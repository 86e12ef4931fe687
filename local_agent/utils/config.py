"""Environment-driven settings for the local agent."""

import os
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..agents.orchestrator import DEFAULT_MAX_TURNS
from ..llm.ollama import DEFAULT_MODEL, DEFAULT_OLLAMA_HOST
from ..tools.tool import DEFAULT_COMMAND_TIMEOUT_SECONDS


class Settings(BaseModel):
    """Runtime settings, read from ``LOCAL_AGENT_*`` environment variables."""

    ollama_host: str = Field(default=DEFAULT_OLLAMA_HOST, description="Ollama server URL")
    model: str = Field(default=DEFAULT_MODEL, description="Model name served by Ollama")
    max_turns: int = Field(default=DEFAULT_MAX_TURNS, ge=1, description="Agent turn limit")
    temperature: float = Field(default=0.7, ge=0.0, description="Sampling temperature")
    max_tokens: int = Field(default=2048, ge=1, description="Maximum tokens per generation")
    system_prompt: str | None = Field(default=None, description="Base system prompt")
    allowed_directories: list[str] = Field(
        default_factory=list, description="Extra sandbox roots on top of the defaults"
    )
    command_timeout: float = Field(
        default=DEFAULT_COMMAND_TIMEOUT_SECONDS, gt=0, description="Tool subprocess timeout"
    )
    log_file: str | None = Field(default=None, description="Redirect logs to this file")


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def load_settings() -> Settings:
    """Build Settings from the environment (and a ``.env`` file, if present).

    Unset variables fall back to the defaults. Invalid values raise
    ``pydantic.ValidationError``.
    """
    load_dotenv()

    values = {
        "ollama_host": os.getenv("OLLAMA_HOST"),
        "model": os.getenv("LOCAL_AGENT_MODEL"),
        "max_turns": os.getenv("LOCAL_AGENT_MAX_TURNS"),
        "temperature": os.getenv("LOCAL_AGENT_TEMPERATURE"),
        "max_tokens": os.getenv("LOCAL_AGENT_MAX_TOKENS"),
        "system_prompt": os.getenv("LOCAL_AGENT_SYSTEM_PROMPT"),
        "command_timeout": os.getenv("LOCAL_AGENT_COMMAND_TIMEOUT"),
        "log_file": os.getenv("LOCAL_AGENT_LOG_FILE"),
    }
    settings = {key: value for key, value in values.items() if value}
    settings["allowed_directories"] = _split_list(os.getenv("LOCAL_AGENT_ALLOWED_DIRS"))
    return Settings.model_validate(settings)


def is_localhost_url(url: str) -> bool:
    """Check if URL is a localhost address."""
    try:
        if url:
            hostname = urlparse(url).hostname or ""
            return hostname in ("localhost", "127.0.0.1", "::1") or hostname.startswith("127.")
        return False
    except ValueError:
        return False
