"""Bridge configuration: explicit settings passed into each session."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_MODEL = "gpt-3.5-turbo"
ADVANCED_MODEL = "gpt-4"

# Environment variable -> config field
_ENV_FIELDS: dict[str, str] = {
    "LLM_BRIDGE_MODEL": "model",
    "LLM_BRIDGE_ADVANCED_MODEL": "use_advanced_model",
    "LLM_BRIDGE_ENDPOINT": "endpoint_override",
    "LLM_BRIDGE_MANUAL": "manual_mode",
    "LLM_BRIDGE_CLIPBOARD": "copy_to_clipboard",
    "LLM_BRIDGE_TOKEN_CEILING": "token_ceiling",
    "LLM_BRIDGE_HISTORY_WINDOW": "history_window",
    "LLM_BRIDGE_MAX_RETRIES": "max_retries",
    "LLM_BRIDGE_RETRY_DELAY_MS": "initial_retry_delay_ms",
    "LLM_BRIDGE_TIMEOUT_MS": "call_timeout_ms",
    "LLM_BRIDGE_TRANSCRIPT_DIR": "transcript_dir",
}


class BridgeConfig(BaseModel):
    """Settings for one bridge session."""

    model: str = DEFAULT_MODEL
    use_advanced_model: bool = False
    endpoint_override: str | None = None
    manual_mode: bool = False
    copy_to_clipboard: bool = False
    token_ceiling: int = Field(default=8192, gt=0)
    history_window: int = Field(default=10, ge=0)
    max_retries: int = Field(default=3, ge=0)
    initial_retry_delay_ms: int = Field(default=5000, ge=0)
    call_timeout_ms: int = Field(default=120_000, gt=0)
    transcript_dir: Path = Path("output/chat-histories")

    @property
    def effective_model(self) -> str:
        """The model actually requested; the advanced flag wins."""
        return ADVANCED_MODEL if self.use_advanced_model else self.model

    @property
    def initial_retry_delay(self) -> float:
        return self.initial_retry_delay_ms / 1000

    @property
    def call_timeout(self) -> float:
        return self.call_timeout_ms / 1000

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> BridgeConfig:
        """Build a config from ``LLM_BRIDGE_*`` variables; *overrides* win.

        Values are validated by pydantic, so ``"true"``/``"1"`` parse as
        booleans and numeric strings as integers.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for var, field in _ENV_FIELDS.items():
            raw = env.get(var, "").strip()
            if raw:
                values[field] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
