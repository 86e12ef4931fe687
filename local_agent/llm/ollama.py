"""Ollama generation engine for local models.

Talks to a local Ollama server over its streaming ``/api/chat`` endpoint and
keeps the conversation like a chat session.

Usage:
    engine = OllamaEngine(model="llama3.1:8b")
    text = await engine.generate_stream("Hello", on_token=print)

    # Or with custom host:
    engine = OllamaEngine(model="llama3.1:8b", host="http://my-server:11434")
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import httpx

from ..errors import GenerationBusyError, GenerationError
from .engine import GenerationOptions, TokenCallback

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_MODEL = "llama3.1:8b"


class OllamaEngine:
    """GenerationEngine backed by a local Ollama server."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        host: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = 300.0,
    ):
        self.model = model
        self.host = (host or os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST)).rstrip("/")
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._history: list[dict[str, str]] = []
        self._generating = False
        self._stop_requested = False

    @property
    def history(self) -> list[dict[str, str]]:
        return list(self._history)

    @property
    def is_generating(self) -> bool:
        return self._generating

    def reset(self) -> None:
        """Forget the conversation so far."""
        self._history.clear()

    def stop_generation(self) -> None:
        """Ask the in-flight generation to stop after the current chunk."""
        if self._generating:
            self._stop_requested = True

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout, connect=5.0))
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _build_request(self, prompt: str, options: GenerationOptions) -> dict[str, Any]:
        messages: list[dict[str, str]] = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})
        messages.extend(self._history)
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.model,
            "messages": messages,
            "stream": True,
            "options": {
                "temperature": options.temperature,
                "num_predict": options.max_tokens,
            },
        }

    async def generate_stream(
        self,
        prompt: str,
        on_token: TokenCallback,
        options: GenerationOptions | None = None,
    ) -> str:
        """Stream a chat completion, calling ``on_token`` per content fragment.

        Raises:
            GenerationBusyError: If another generation is in flight.
            GenerationError: If the server is unreachable or reports an error.
        """
        if self._generating:
            raise GenerationBusyError("Already generating")

        self._generating = True
        self._stop_requested = False
        options = options or GenerationOptions()
        body = self._build_request(prompt, options)
        parts: list[str] = []

        try:
            client = self._get_client()
            async with client.stream("POST", f"{self.host}/api/chat", json=body) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    try:
                        chunk = json.loads(line)
                    except json.JSONDecodeError:
                        logger.warning("Skipping malformed Ollama stream line: %r", line[:200])
                        continue

                    if chunk.get("error"):
                        raise GenerationError(f"Ollama error: {chunk['error']}")

                    content = (chunk.get("message") or {}).get("content") or ""
                    if content:
                        parts.append(content)
                        on_token(content)

                    if chunk.get("done") or self._stop_requested:
                        break
        except httpx.HTTPStatusError as e:
            raise GenerationError(
                f"Ollama request failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Could not reach Ollama at {self.host}: {e}") from e
        finally:
            self._generating = False

        text = "".join(parts)
        self._history.append({"role": "user", "content": prompt})
        self._history.append({"role": "assistant", "content": text})
        logger.debug("Generated %d characters with %s", len(text), self.model)
        return text
