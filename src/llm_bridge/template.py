"""Prompt templates supplying the standing explanatory message."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class PromptTemplate(Protocol):
    """Anything that can produce the explanatory context for a session."""

    def explanatory_message(self) -> str: ...


class StaticTemplate:
    """Template whose explanatory message is a fixed string."""

    def __init__(self, text: str) -> None:
        self._text = text

    @classmethod
    def from_file(cls, path: Path | str) -> StaticTemplate:
        return cls(Path(path).read_text(encoding="utf-8"))

    def explanatory_message(self) -> str:
        return self._text
