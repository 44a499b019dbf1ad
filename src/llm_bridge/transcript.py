"""Append-only Markdown transcript of a bridge session."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TextIO

_FENCE = "```"


def format_turn(prompt: str, reply: str) -> str:
    """Render one prompt/reply exchange as two fenced blocks."""
    return f"{_FENCE}\n{prompt}\n{_FENCE}\n\n{_FENCE}\n{reply}\n{_FENCE}\n\n"


class TranscriptSink:
    """Writes each turn of a session to its own file, appending only."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._handle: TextIO | None = None

    @classmethod
    def create(
        cls,
        directory: Path | str,
        session_id: str,
        started_at: datetime | None = None,
    ) -> TranscriptSink:
        """Create *directory* and name the file ``[<id>] <start time>.md``."""
        started = started_at or datetime.now(tz=UTC)
        target = Path(directory)
        target.mkdir(parents=True, exist_ok=True)
        stamp = started.isoformat(timespec="milliseconds")
        return cls(target / f"[{session_id}] {stamp}.md")

    @property
    def path(self) -> Path:
        return self._path

    def record(self, prompt: str, reply: str) -> None:
        if self._handle is None:
            self._handle = self._path.open("a", encoding="utf-8")
        self._handle.write(format_turn(prompt, reply))
        self._handle.flush()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
