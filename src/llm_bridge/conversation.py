"""Ordered conversation history for a single bridge session."""

from __future__ import annotations

from typing import Any

from .provider import ChatMessage, ChatRole


class ConversationStore:
    """Holds the message history of one session.

    Growth is unbounded; windowing only happens when a request is built.
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def last(self) -> ChatMessage | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    def clear(self) -> None:
        self._messages.clear()

    def remove_last(self) -> ChatMessage | None:
        """Retract the most recently appended message, if any."""
        if not self._messages:
            return None
        return self._messages.pop()

    def windowed_tail(self, n: int) -> list[ChatMessage]:
        """Return the last *n* messages (fewer if the store is shorter)."""
        if n <= 0:
            return []
        return self._messages[-n:]

    def summary(self) -> dict[str, Any]:
        """Return a summary of the conversation state."""
        return {
            "message_count": len(self._messages),
            "user_messages": sum(1 for m in self._messages if m.role == ChatRole.USER),
            "assistant_messages": sum(
                1 for m in self._messages if m.role == ChatRole.ASSISTANT
            ),
        }
