"""Tests for token budget enforcement."""

from __future__ import annotations

import pytest

from llm_bridge import token_budget
from llm_bridge.errors import BudgetExhaustedError
from llm_bridge.provider import ChatMessage
from llm_bridge.token_budget import (
    HeuristicCounter,
    TiktokenCounter,
    TokenBudgetEnforcer,
    estimate_tokens,
)


class LengthCounter:
    """One token per message; makes limits easy to reason about."""

    def count(self, messages: list[ChatMessage]) -> int:
        return len(messages)


def _messages(n: int) -> list[ChatMessage]:
    return [ChatMessage.user(f"m{i}") for i in range(n)]


def test_estimate_tokens():
    assert estimate_tokens("hello world") == 3  # 2 words * 1.3 ~ 2.6 -> 3
    assert estimate_tokens("") == 0
    assert estimate_tokens("a " * 100) > 100


def test_fits_is_a_pure_predicate():
    enforcer = TokenBudgetEnforcer(LengthCounter())
    msgs = _messages(4)
    assert enforcer.fits(msgs, 4)
    assert not enforcer.fits(msgs, 3)
    assert len(msgs) == 4


def test_shrink_removes_second_element():
    enforcer = TokenBudgetEnforcer(LengthCounter())
    msgs = _messages(4)
    result = enforcer.shrink(msgs)
    assert result is msgs
    assert [m.content for m in msgs] == ["m0", "m2", "m3"]


@pytest.mark.parametrize("size", [0, 1, 2])
def test_shrink_refuses_small_sets(size: int):
    enforcer = TokenBudgetEnforcer(LengthCounter())
    with pytest.raises(BudgetExhaustedError):
        enforcer.shrink(_messages(size))


def test_ensure_fits_stops_as_soon_as_it_fits():
    enforcer = TokenBudgetEnforcer(LengthCounter())
    msgs = _messages(6)
    removed = enforcer.ensure_fits(msgs, 4)
    assert removed == 2
    assert [m.content for m in msgs] == ["m0", "m3", "m4", "m5"]


def test_ensure_fits_keeps_first_and_last():
    enforcer = TokenBudgetEnforcer(LengthCounter())
    msgs = _messages(7)
    removed = enforcer.ensure_fits(msgs, 0)
    assert removed == 5  # bounded by len - 2
    assert [m.content for m in msgs] == ["m0", "m6"]


def test_ensure_fits_noop_when_already_within_limit():
    enforcer = TokenBudgetEnforcer(LengthCounter())
    msgs = _messages(3)
    assert enforcer.ensure_fits(msgs, 100) == 0
    assert len(msgs) == 3


def test_ensure_fits_single_message_never_raises():
    enforcer = TokenBudgetEnforcer(LengthCounter())
    msgs = _messages(1)
    assert enforcer.ensure_fits(msgs, 0) == 0
    assert len(msgs) == 1


def test_heuristic_counter_grows_with_content():
    counter = HeuristicCounter()
    short = counter.count([ChatMessage.user("hi")])
    long = counter.count([ChatMessage.user("word " * 200)])
    assert long > short > 0


class _FakeEncoding:
    def encode(self, text: str) -> list[int]:
        return [0] * len(text.split())


def test_tiktoken_counter_adds_chat_overhead(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(token_budget, "_encoding_for", lambda model: _FakeEncoding())
    counter = TiktokenCounter("gpt-3.5-turbo")
    msgs = [ChatMessage.user("one two three"), ChatMessage.assistant("four")]
    # priming 3 + per message (3 + role 1 + content)
    assert counter.count(msgs) == 3 + (3 + 1 + 3) + (3 + 1 + 1)


def test_default_counter_is_tiktoken():
    assert isinstance(TokenBudgetEnforcer().counter, TiktokenCounter)
