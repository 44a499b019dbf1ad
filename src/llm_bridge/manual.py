"""Manual mode: replies typed by an operator instead of the remote service."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from .clipboard import copy_text
from .errors import ClipboardError

logger = logging.getLogger(__name__)


class ReplyChannel(ABC):
    """Source of replies when the bridge runs in manual mode."""

    @abstractmethod
    async def ask(self, prompt: str) -> str:
        """Surface *prompt* to the operator and return their reply."""


class ConsoleReplyChannel(ReplyChannel):
    """Reads replies from the terminal, optionally copying the prompt first."""

    def __init__(
        self,
        copy_to_clipboard: bool = False,
        input_fn: Callable[[str], str] = input,
        marker: str = "?> ",
    ) -> None:
        self._copy = copy_to_clipboard
        self._input = input_fn
        self._marker = marker

    async def ask(self, prompt: str) -> str:
        if self._copy:
            try:
                copy_text(prompt)
            except ClipboardError as exc:
                logger.warning("Could not copy prompt to clipboard: %s", exc)
        # input() blocks, so keep it off the event loop
        return await asyncio.to_thread(self._input, self._marker)
