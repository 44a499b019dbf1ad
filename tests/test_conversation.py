"""Tests for the conversation store."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from llm_bridge.conversation import ConversationStore
from llm_bridge.provider import ChatMessage, ChatRole


def _store_with(n: int) -> ConversationStore:
    store = ConversationStore()
    for i in range(n):
        store.append(ChatMessage.user(f"msg {i}"))
    return store


def test_append_preserves_order():
    store = ConversationStore()
    store.append(ChatMessage.user("Hello"))
    store.append(ChatMessage.assistant("Hi"))
    assert len(store) == 2
    assert store.messages[0].role == ChatRole.USER
    assert store.messages[1].role == ChatRole.ASSISTANT
    assert store.last == ChatMessage.assistant("Hi")


def test_append_then_tail_of_one_returns_it():
    store = _store_with(3)
    msg = ChatMessage.user("newest")
    store.append(msg)
    assert store.windowed_tail(1) == [msg]


@pytest.mark.parametrize(("size", "window"), [(0, 3), (2, 3), (3, 3), (10, 3), (5, 1)])
def test_windowed_tail_returns_most_recent_in_order(size: int, window: int):
    store = _store_with(size)
    tail = store.windowed_tail(window)
    assert len(tail) == min(size, window)
    assert [m.content for m in tail] == [f"msg {i}" for i in range(size - len(tail), size)]


def test_windowed_tail_does_not_mutate():
    store = _store_with(5)
    tail = store.windowed_tail(2)
    tail.clear()
    assert len(store) == 5


def test_windowed_tail_zero_is_empty():
    assert _store_with(4).windowed_tail(0) == []


def test_remove_last():
    store = _store_with(2)
    removed = store.remove_last()
    assert removed is not None
    assert removed.content == "msg 1"
    assert [m.content for m in store.messages] == ["msg 0"]


def test_remove_last_on_empty_store():
    assert ConversationStore().remove_last() is None


def test_clear_empties_all_messages():
    store = _store_with(4)
    store.clear()
    assert len(store) == 0
    assert store.last is None


def test_messages_property_is_a_copy():
    store = _store_with(1)
    store.messages.append(ChatMessage.user("sneaky"))
    assert len(store) == 1


def test_summary_counts_roles():
    store = ConversationStore()
    store.append(ChatMessage.user("q"))
    store.append(ChatMessage.assistant("a"))
    store.append(ChatMessage.user("q2"))
    s = store.summary()
    assert s == {"message_count": 3, "user_messages": 2, "assistant_messages": 1}


def test_message_is_immutable():
    msg = ChatMessage.user("fixed")
    with pytest.raises(ValidationError):
        msg.content = "changed"  # type: ignore[misc]
