"""LLM Bridge offline demo.

Runs a short conversation against the stub provider:
1. The first prompt carries the explanatory message
2. History grows past the window and the explanation is re-sent up front
3. A stateless one-shot query leaves the history untouched
4. The transcript is written to a temporary directory

No network or API key needed.

Run: python examples/stub_session.py
"""

from __future__ import annotations

import asyncio
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from llm_bridge import BridgeConfig, HeuristicCounter, LLMBridge, StaticTemplate, StubLLMProvider


async def run_demo() -> None:
    print("=" * 60)
    print("LLM Bridge stub session")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        config = BridgeConfig(history_window=2, transcript_dir=Path(tmp))
        template = StaticTemplate("You answer questions about the demo.\n\n")

        async with LLMBridge(
            "demo",
            template,
            config,
            provider=StubLLMProvider(),
            counter=HeuristicCounter(),
        ) as bridge:
            for prompt in ("Hello", "What is a window?", "And a token ceiling?"):
                reply = await bridge.submit_prompt(prompt)
                print(f"> {prompt}\n  {reply}")
            print(f"History: {len(bridge.history)} messages")

            reply = await bridge.submit_prompt_stateless("One-off question")
            print(f"> (stateless) One-off question\n  {reply}")
            print(f"History after stateless call: {len(bridge.history)} messages")

            print()
            print(bridge.transcript.path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    asyncio.run(run_demo())
