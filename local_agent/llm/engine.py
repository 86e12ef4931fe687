"""Generation engine interface consumed by the agent orchestrator."""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

TokenCallback = Callable[[str], None]


class GenerationOptions(BaseModel):
    """Sampling options for one generation."""

    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_tokens: int = Field(default=2048, description="Maximum tokens to generate")
    system_prompt: str | None = Field(
        default=None, description="System prompt sent ahead of the conversation"
    )


@runtime_checkable
class GenerationEngine(Protocol):
    """A streaming text generator that keeps its own conversation state."""

    async def generate_stream(
        self,
        prompt: str,
        on_token: TokenCallback,
        options: GenerationOptions | None = None,
    ) -> str:
        """
        Generate a reply to ``prompt``.

        Args:
            prompt: The user-role message for this turn
            on_token: Called with each text fragment as it arrives. Exceptions
                raised by the callback abort the generation and propagate.
            options: Sampling options

        Returns:
            The complete generated text
        """
        ...
