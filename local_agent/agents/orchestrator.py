"""Agent orchestrator -- the bounded generate / detect / execute loop.

Each run streams the model's reply through a StreamingToolCallDetector. A
turn without a tool call ends the run; a turn with one executes the call and
feeds the result back as the next prompt. Tool failures end the run, and the
number of turns is capped.
"""

from __future__ import annotations

import logging

from ..errors import GenerationBusyError, GenerationCancelledError
from ..llm.engine import GenerationEngine, GenerationOptions, TokenCallback
from ..tools.executor import ToolExecutor
from ..types.types import AgentRunResult, AgentRunStatus, AgentTurn, ToolCall
from .detector import StreamingToolCallDetector
from .guard import CancellationToken, SingleFlightGuard
from .prompts import (
    DEFAULT_SYSTEM_PROMPT,
    build_system_prompt_with_tools,
    build_tool_result_prompt,
    format_tool_error,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 5


class AgentOrchestrator:
    """Drives one user request through at most ``max_turns`` generation turns."""

    def __init__(
        self,
        engine: GenerationEngine,
        executor: ToolExecutor,
        max_turns: int | None = None,
        system_prompt: str | None = None,
        tools_enabled: bool = True,
    ):
        self.engine = engine
        self.executor = executor
        if max_turns is None:
            max_turns = DEFAULT_MAX_TURNS
        if max_turns < 1:
            raise ValueError(f"max_turns must be at least 1, got {max_turns}")
        self.max_turns = max_turns
        self.system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        self.tools_enabled = tools_enabled
        self._guard = SingleFlightGuard()
        self._cancellation = CancellationToken()

    @property
    def is_generating(self) -> bool:
        return self._guard.busy

    def stop(self) -> None:
        """Cancel the in-flight run, if any."""
        if not self._guard.busy:
            return
        logger.info("Stopping generation")
        self._cancellation.cancel()
        stop_generation = getattr(self.engine, "stop_generation", None)
        if callable(stop_generation):
            stop_generation()

    def build_system_prompt(self, base_prompt: str | None = None) -> str:
        evaluator = self.executor.evaluator
        allowed = [
            evaluator.format_for_display(d) for d in evaluator.get_config().allowed_directories
        ]
        return build_system_prompt_with_tools(
            base_prompt or self.system_prompt, self.executor.registry.list_tools(), allowed
        )

    async def run(
        self,
        message: str,
        on_token: TokenCallback | None = None,
        *,
        options: GenerationOptions | None = None,
    ) -> AgentRunResult:
        """
        Answer one user message, calling tools as the model requests them.

        Args:
            message: The user's message
            on_token: Receives user-visible text as it becomes available
            options: Sampling options; ``system_prompt`` overrides the default

        Returns:
            AgentRunResult. Never raises for busy, cancelled or failed runs.
        """
        if not self._guard.try_acquire():
            logger.warning("Rejected request: already generating")
            return AgentRunResult(status=AgentRunStatus.BUSY, error="Already generating")

        self._cancellation.reset()
        visible: list[str] = []

        def emit(text: str) -> None:
            if not text:
                return
            self._cancellation.raise_if_cancelled()
            visible.append(text)
            if on_token is not None:
                on_token(text)

        options = options or GenerationOptions()
        turns = 0
        tool_calls: list[ToolCall] = []
        try:
            if not self.tools_enabled:
                turns = 1
                plain_options = options.model_copy(
                    update={"system_prompt": options.system_prompt or self.system_prompt}
                )
                await self.engine.generate_stream(message, emit, plain_options)
                return AgentRunResult(
                    status=AgentRunStatus.COMPLETED, response="".join(visible), turns=turns
                )

            turn_options = options.model_copy(
                update={"system_prompt": self.build_system_prompt(options.system_prompt)}
            )
            prompt = message
            while turns < self.max_turns:
                turns += 1
                turn = await self._generate_turn(turns, prompt, emit, turn_options)

                if not turn.has_tool_call or turn.tool_call is None:
                    return AgentRunResult(
                        status=AgentRunStatus.COMPLETED,
                        response="".join(visible),
                        turns=turns,
                        tool_calls=tool_calls,
                    )

                call = turn.tool_call
                tool_calls.append(call)
                outcome = await self.executor.execute(call)
                if not outcome.success:
                    logger.warning("Tool %s failed: %s", call.tool, outcome.error)
                    emit(format_tool_error(outcome.error))
                    return AgentRunResult(
                        status=AgentRunStatus.FAILED,
                        response="".join(visible),
                        turns=turns,
                        tool_calls=tool_calls,
                        error=outcome.error,
                    )

                prompt = build_tool_result_prompt(call.tool, outcome.result)

            logger.warning(
                "Agent reached the turn limit (%d) without a final answer", self.max_turns
            )
            return AgentRunResult(
                status=AgentRunStatus.TURN_LIMIT,
                response="".join(visible),
                turns=turns,
                tool_calls=tool_calls,
            )
        except GenerationCancelledError:
            logger.info("Generation cancelled after %d turn(s)", turns)
            return AgentRunResult(
                status=AgentRunStatus.CANCELLED,
                response="".join(visible),
                turns=turns,
                tool_calls=tool_calls,
            )
        except GenerationBusyError as e:
            return AgentRunResult(status=AgentRunStatus.BUSY, turns=turns, error=str(e))
        except Exception as e:
            logger.error("Agent generation error: %s", e)
            return AgentRunResult(
                status=AgentRunStatus.FAILED,
                response="".join(visible),
                turns=turns,
                tool_calls=tool_calls,
                error=f"Generation failed: {e}",
            )
        finally:
            self._guard.release()

    async def _generate_turn(
        self,
        index: int,
        prompt: str,
        emit: TokenCallback,
        options: GenerationOptions,
    ) -> AgentTurn:
        detector = StreamingToolCallDetector()

        def on_chunk(chunk: str) -> None:
            self._cancellation.raise_if_cancelled()
            emit(detector.feed(chunk))

        text = await self.engine.generate_stream(prompt, on_chunk, options)
        if not detector.text and text:
            # Engine returned its reply without streaming it
            emit(detector.feed(text))
        emit(detector.finish())

        logger.debug("Turn %d finished (tool call: %s)", index, detector.detected)
        return AgentTurn(
            index=index,
            text=detector.text,
            has_tool_call=detector.detected,
            tool_call=detector.tool_call,
        )
