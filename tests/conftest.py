"""Shared test doubles: scripted providers and a recording sleep."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from llm_bridge.provider import ChatRequest, ChatResponse, LLMProvider


class ScriptedProvider(LLMProvider):
    """Plays back a script of replies, exceptions, or delayed replies.

    Each step is one of:
        - ``str``: returned as the reply content
        - ``BaseException``: raised
        - ``("slow", seconds, reply)``: reply after sleeping
    Once the script is exhausted, every call returns ``"ok"``.
    """

    def __init__(self, script: list[Any] | None = None) -> None:
        self._script = list(script or [])
        self.requests: list[ChatRequest] = []

    def name(self) -> str:
        return "scripted"

    async def chat(self, request: ChatRequest) -> ChatResponse:
        self.requests.append(request)
        step = self._script.pop(0) if self._script else "ok"
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, tuple):
            _, seconds, reply = step
            await asyncio.sleep(seconds)
            if isinstance(reply, BaseException):
                raise reply
            return ChatResponse(content=reply)
        return ChatResponse(content=step)


class SleepRecorder:
    """Async stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def scripted() -> Callable[..., ScriptedProvider]:
    return ScriptedProvider


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()
