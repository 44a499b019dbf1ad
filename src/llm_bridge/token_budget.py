"""Token budget enforcement: keeps outgoing message sets under the provider ceiling."""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Protocol

import tiktoken

from .errors import BudgetExhaustedError
from .provider import ChatMessage

logger = logging.getLogger(__name__)

# Chat formatting overhead per message and for priming the reply.
_TOKENS_PER_MESSAGE = 3
_REPLY_PRIMING_TOKENS = 3
_FALLBACK_ENCODING = "cl100k_base"


def estimate_tokens(text: str) -> int:
    """Estimate token count from text. Rough heuristic: words * 1.3."""
    if not text:
        return 0
    words = len(text.split())
    return math.ceil(words * 1.3)


class TokenCounter(Protocol):
    """Counts the tokens a message set costs in one request."""

    def count(self, messages: list[ChatMessage]) -> int: ...


@lru_cache(maxsize=8)
def _encoding_for(model: str) -> tiktoken.Encoding:
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        return tiktoken.get_encoding(_FALLBACK_ENCODING)


class TiktokenCounter:
    """Counts chat tokens with the model's tiktoken encoding."""

    def __init__(self, model: str = "gpt-3.5-turbo") -> None:
        self._model = model

    def count(self, messages: list[ChatMessage]) -> int:
        encoding = _encoding_for(self._model)
        total = _REPLY_PRIMING_TOKENS
        for message in messages:
            total += _TOKENS_PER_MESSAGE
            total += len(encoding.encode(message.role.value))
            total += len(encoding.encode(message.content))
        return total


class HeuristicCounter:
    """Word-based estimate for offline use."""

    def count(self, messages: list[ChatMessage]) -> int:
        return _REPLY_PRIMING_TOKENS + sum(
            _TOKENS_PER_MESSAGE + 1 + estimate_tokens(m.content) for m in messages
        )


class TokenBudgetEnforcer:
    """Decides whether a message set fits a token ceiling and shrinks it if not.

    Shrinking always drops the element at index 1: the first element is the
    standing explanatory message (when present) and the last one is the
    newest prompt, so neither is ever removed.
    """

    def __init__(self, counter: TokenCounter | None = None) -> None:
        self._counter = counter or TiktokenCounter()

    @property
    def counter(self) -> TokenCounter:
        return self._counter

    def fits(self, messages: list[ChatMessage], limit: int) -> bool:
        return self._counter.count(messages) <= limit

    def shrink(self, messages: list[ChatMessage]) -> list[ChatMessage]:
        """Remove the second message in place and return the same list."""
        if len(messages) <= 2:
            msg = f"Cannot shrink a message set of {len(messages)} element(s) any further"
            raise BudgetExhaustedError(msg)
        del messages[1]
        logger.info("Had to reduce number of messages to comply with the API's token limit")
        return messages

    def ensure_fits(self, messages: list[ChatMessage], limit: int) -> int:
        """Shrink *messages* until it fits *limit* or two elements remain.

        Returns the number of messages removed.
        """
        removed = 0
        while len(messages) > 2 and not self.fits(messages, limit):
            self.shrink(messages)
            removed += 1
        return removed
