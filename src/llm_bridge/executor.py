"""Single-attempt remote call, raced against a deadline."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from .provider import ChatMessage, ChatRequest, ChatResponse, LLMProvider

logger = logging.getLogger(__name__)

# Substrings in a provider error that signal the request exceeded the context length.
CONTEXT_LENGTH_MARKERS: tuple[str, ...] = (
    "Please reduce the length of the messages.",
    "context_length_exceeded",
)


# ---------------------------------------------------------------------------
# Attempt outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AttemptSuccess:
    reply: str


@dataclass(frozen=True)
class AttemptTimeout:
    timeout: float

    @property
    def detail(self) -> str:
        return f"API call timed out after {self.timeout:g}s"

    @property
    def is_context_length_exceeded(self) -> bool:
        return False


@dataclass(frozen=True)
class AttemptFailure:
    """The provider rejected the request."""

    detail: str

    @property
    def is_context_length_exceeded(self) -> bool:
        return any(marker in self.detail for marker in CONTEXT_LENGTH_MARKERS)


AttemptOutcome = AttemptSuccess | AttemptTimeout | AttemptFailure


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------


class RemoteCallExecutor:
    """Performs one provider call under a timeout.

    A call that misses its deadline is abandoned, not cancelled: it keeps
    running in the background and whatever it eventually produces is
    discarded by a done-callback.
    """

    def __init__(self, provider: LLMProvider) -> None:
        self._provider = provider
        self._abandoned: set[asyncio.Task[ChatResponse]] = set()

    @property
    def provider(self) -> LLMProvider:
        return self._provider

    @property
    def pending(self) -> int:
        """Number of abandoned calls that have not settled yet."""
        return len(self._abandoned)

    async def call(
        self,
        messages: list[ChatMessage],
        model: str,
        timeout: float,
    ) -> AttemptOutcome:
        request = ChatRequest(model=model, messages=messages)
        task = asyncio.ensure_future(self._provider.chat(request))
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            self._abandon(task)
            raise

        if task not in done:
            self._abandon(task)
            return AttemptTimeout(timeout=timeout)

        exc = task.exception()
        if exc is not None:
            return AttemptFailure(detail=str(exc))
        response = task.result()
        if response.usage is not None:
            logger.debug(
                "Reply used %d prompt and %d completion tokens",
                response.usage.prompt_tokens,
                response.usage.completion_tokens,
            )
        return AttemptSuccess(reply=response.content)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _abandon(self, task: asyncio.Task[ChatResponse]) -> None:
        self._abandoned.add(task)
        task.add_done_callback(self._discard_late_result)

    def _discard_late_result(self, task: asyncio.Task[ChatResponse]) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("Ignoring late failure of abandoned call: %s", exc)
        else:
            logger.debug("Ignoring late reply of abandoned call")
