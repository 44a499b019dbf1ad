"""Interactive REPL around a single bridge session."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from collections.abc import Callable, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .bridge import LLMBridge
from .config import BridgeConfig
from .errors import BridgeError
from .provider_factory import ProviderFactory
from .telemetry import TelemetryConfig, configure_tracing
from .template import PromptTemplate, StaticTemplate

_STATELESS_PREFIX = "/once "

_DEFAULT_EXPLANATION = (
    "You are assisting through a terminal session. Answer concisely.\n\n"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="llm-bridge", description="Chat with a remote LLM.")
    parser.add_argument("--model", help="model identifier")
    parser.add_argument(
        "--advanced", dest="use_advanced_model", action="store_true", default=None,
        help="use the stronger default model",
    )
    parser.add_argument("--model-endpoint", dest="endpoint_override", help="API base URL")
    parser.add_argument(
        "--manual", dest="manual_mode", action="store_true", default=None,
        help="type replies yourself instead of calling the API",
    )
    parser.add_argument(
        "--clipboard", dest="copy_to_clipboard", action="store_true", default=None,
        help="copy each prompt to the clipboard in manual mode",
    )
    parser.add_argument("--context-window", dest="token_ceiling", type=int, help="token ceiling")
    parser.add_argument("--history-window", dest="history_window", type=int)
    parser.add_argument("--max-retries", dest="max_retries", type=int)
    parser.add_argument("--retry-delay-ms", dest="initial_retry_delay_ms", type=int)
    parser.add_argument("--timeout-ms", dest="call_timeout_ms", type=int)
    parser.add_argument("--transcript-dir", dest="transcript_dir")
    parser.add_argument("--session-id", default=None)
    parser.add_argument("--explanation-file", default=None)
    parser.add_argument("--trace", choices=["none", "stdout", "otlp"], default="none")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def config_from_args(args: argparse.Namespace) -> BridgeConfig:
    overrides = {
        field: getattr(args, field)
        for field in (
            "model",
            "use_advanced_model",
            "endpoint_override",
            "manual_mode",
            "copy_to_clipboard",
            "token_ceiling",
            "history_window",
            "max_retries",
            "initial_retry_delay_ms",
            "call_timeout_ms",
            "transcript_dir",
        )
    }
    return BridgeConfig.from_env(**overrides)


def load_template(path: str | None) -> PromptTemplate:
    if path is None:
        return StaticTemplate(_DEFAULT_EXPLANATION)
    return StaticTemplate.from_file(path)


async def repl(bridge: LLMBridge, read: Callable[[str], str] = input) -> None:
    """Read prompts until EOF or ``quit``, printing each reply."""
    print(f"LLM Bridge REPL v{__version__}")
    print(f"Model: {bridge.model} via {ProviderFactory.describe(bridge.provider)}")
    print("Type 'help' for commands, 'quit' or 'exit' to exit")
    print()

    while True:
        try:
            user_input = await asyncio.to_thread(read, "bridge> ")
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        stripped = user_input.strip()
        if not stripped:
            continue
        if stripped in ("quit", "exit"):
            print("Bye!")
            break
        if stripped == "help":
            print("Commands: status, clear, undo, help, quit/exit")
            print(f"Prefix a prompt with '{_STATELESS_PREFIX.strip()}' to send it without history")
            continue
        if stripped == "status":
            print(f"  Session: {bridge.session_id}")
            print(f"  Messages in history: {len(bridge.history)}")
            print(f"  Transcript: {bridge.transcript.path}")
            continue
        if stripped == "clear":
            bridge.clear_history()
            print("  History cleared")
            continue
        if stripped == "undo":
            removed = bridge.remove_last_entry()
            print("  Removed last message" if removed else "  History is empty")
            continue

        try:
            if stripped.startswith(_STATELESS_PREFIX):
                reply = await bridge.submit_prompt_stateless(stripped[len(_STATELESS_PREFIX):])
            else:
                reply = await bridge.submit_prompt(stripped)
        except BridgeError as exc:
            print(f"  [!] {exc}")
            continue
        except (EOFError, KeyboardInterrupt):
            # Manual mode: the operator closed input while a reply was pending
            print("\nBye!")
            break
        print(reply)
        print()


async def async_main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    session_id = args.session_id or uuid.uuid4().hex[:12]
    try:
        config = config_from_args(args)
        bridge = LLMBridge(session_id, load_template(args.explanation_file), config)
    except ValidationError as exc:
        print(f"[!] Invalid configuration: {exc}", file=sys.stderr)
        return 2
    except BridgeError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1

    tracer = configure_tracing(TelemetryConfig(exporter=args.trace))
    try:
        async with bridge:
            await repl(bridge)
    finally:
        tracer.shutdown()
    return 0


def main() -> None:
    """Entry point for the ``llm-bridge`` command."""
    load_dotenv()
    sys.exit(asyncio.run(async_main()))


if __name__ == "__main__":
    main()
