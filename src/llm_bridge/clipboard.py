"""Write text to the system clipboard.

On Windows, uses PowerShell Set-Clipboard.
On macOS, uses pbcopy.
On Linux, uses xclip or xsel.
"""

from __future__ import annotations

import platform
import subprocess

from .errors import ClipboardError

_LINUX_COMMANDS: tuple[list[str], ...] = (
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
)


def _run(cmd: list[str], text: str) -> None:
    result = subprocess.run(cmd, input=text, capture_output=True, text=True, timeout=10)
    if result.returncode != 0:
        raise ClipboardError(f"{cmd[0]} failed: {result.stderr.strip()}")


def copy_text(text: str) -> None:
    """Place *text* on the clipboard; raise :class:`ClipboardError` on failure."""
    system = platform.system()
    try:
        if system == "Windows":
            # Pipe via stdin to avoid quoting problems with special characters
            _run(["powershell", "-NoProfile", "-Command", "$input | Set-Clipboard"], text)
            return
        if system == "Darwin":
            _run(["pbcopy"], text)
            return
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ClipboardError(f"Clipboard write failed: {exc}") from exc

    for cmd in _LINUX_COMMANDS:
        try:
            _run(cmd, text)
            return
        except FileNotFoundError:
            continue
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise ClipboardError(f"Clipboard write failed: {exc}") from exc
    raise ClipboardError("No clipboard tool found (install xclip or xsel)")
