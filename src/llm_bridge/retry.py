"""Retry state machine around the remote call executor."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum

from pydantic import BaseModel

from .errors import BudgetExhaustedError, RetriesExhaustedError
from .executor import AttemptSuccess, RemoteCallExecutor
from .provider import ChatMessage
from .telemetry import get_tracer, trace_attempt
from .token_budget import TokenBudgetEnforcer

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[object]]


class RetryPhase(StrEnum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FATAL = "fatal"


# Valid phase transitions; succeeded and fatal are terminal.
_TRANSITIONS: dict[RetryPhase, list[RetryPhase]] = {
    RetryPhase.ATTEMPTING: [RetryPhase.ATTEMPTING, RetryPhase.SUCCEEDED, RetryPhase.FATAL],
    RetryPhase.SUCCEEDED: [],
    RetryPhase.FATAL: [],
}


class RetryState(BaseModel):
    phase: RetryPhase = RetryPhase.ATTEMPTING
    attempt: int = 0
    reply: str | None = None

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.phase]

    def can_transition(self, target: RetryPhase) -> bool:
        return target in _TRANSITIONS.get(self.phase, [])

    def transition(self, target: RetryPhase, reply: str | None = None) -> RetryState:
        if not self.can_transition(target):
            raise ValueError(f"Invalid transition: {self.phase} -> {target}")
        attempt = self.attempt + 1 if target is RetryPhase.ATTEMPTING else self.attempt
        return RetryState(phase=target, attempt=attempt, reply=reply)


class RetryController:
    """Drives repeated executor attempts with exponential backoff.

    Attempt ``n`` that fails is followed by a wait of
    ``initial_delay * 2**n`` seconds. When a failure reports a context-length
    violation, the message list is shrunk in place before the next attempt.
    After ``max_retries + 1`` failures a :class:`RetriesExhaustedError` is
    raised.
    """

    def __init__(
        self,
        executor: RemoteCallExecutor,
        enforcer: TokenBudgetEnforcer,
        *,
        max_retries: int,
        initial_delay: float,
        timeout: float,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if max_retries < 0:
            msg = "max_retries must not be negative"
            raise ValueError(msg)
        self._executor = executor
        self._enforcer = enforcer
        self._max_retries = max_retries
        self._initial_delay = initial_delay
        self._timeout = timeout
        self._sleep = sleep
        self._state = RetryState()

    @property
    def state(self) -> RetryState:
        """The state reached by the most recent :meth:`run`."""
        return self._state

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def delay_for(self, attempt: int) -> float:
        return self._initial_delay * (2**attempt)

    async def run(self, messages: list[ChatMessage], model: str) -> str:
        """Call the provider until it answers or the retry budget is spent."""
        state = RetryState()
        self._state = state
        total = self._max_retries + 1
        tracer = get_tracer()

        while True:
            with trace_attempt(state.attempt, model):
                outcome = await self._executor.call(messages, model, self._timeout)

                if isinstance(outcome, AttemptSuccess):
                    self._state = state.transition(RetryPhase.SUCCEEDED, reply=outcome.reply)
                    return outcome.reply

                logger.warning(
                    "API error during attempt %d/%d (%s)", state.attempt + 1, total, outcome.detail
                )
                attrs = {"bridge.attempt": str(state.attempt), "error.detail": outcome.detail}
                tracer.record_event("attempt_failed", attrs)

                if state.attempt >= self._max_retries:
                    self._state = state.transition(RetryPhase.FATAL)
                    logger.error("Maximum number of retries reached")
                    tracer.record_event("retries_exhausted", attrs)
                    raise RetriesExhaustedError(attempts=total, last_error=outcome.detail)

                if outcome.is_context_length_exceeded:
                    try:
                        self._enforcer.shrink(messages)
                    except BudgetExhaustedError:
                        self._state = state.transition(RetryPhase.FATAL)
                        tracer.record_event("budget_exhausted", attrs)
                        raise
                    tracer.record_event("context_shrunk", {"bridge.messages": str(len(messages))})

            await self._sleep(self.delay_for(state.attempt))
            state = state.transition(RetryPhase.ATTEMPTING)
            self._state = state
