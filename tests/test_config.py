"""Tests for BridgeConfig."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from llm_bridge.config import ADVANCED_MODEL, DEFAULT_MODEL, BridgeConfig


def test_defaults():
    config = BridgeConfig()
    assert config.model == DEFAULT_MODEL
    assert config.effective_model == DEFAULT_MODEL
    assert config.token_ceiling == 8192
    assert config.manual_mode is False
    assert config.copy_to_clipboard is False
    assert config.endpoint_override is None
    assert config.transcript_dir == Path("output/chat-histories")


def test_advanced_flag_overrides_model():
    config = BridgeConfig(model="custom", use_advanced_model=True)
    assert config.effective_model == ADVANCED_MODEL


def test_millisecond_fields_convert_to_seconds():
    config = BridgeConfig(initial_retry_delay_ms=1500, call_timeout_ms=30_000)
    assert config.initial_retry_delay == 1.5
    assert config.call_timeout == 30.0


@pytest.mark.parametrize(
    "field",
    [
        {"token_ceiling": 0},
        {"history_window": -1},
        {"max_retries": -1},
        {"initial_retry_delay_ms": -5},
        {"call_timeout_ms": 0},
    ],
)
def test_invalid_values_rejected(field):
    with pytest.raises(ValidationError):
        BridgeConfig(**field)


def test_from_env_parses_variables():
    env = {
        "LLM_BRIDGE_MODEL": "deepseek-chat",
        "LLM_BRIDGE_MANUAL": "true",
        "LLM_BRIDGE_TOKEN_CEILING": "16384",
        "LLM_BRIDGE_HISTORY_WINDOW": "4",
        "LLM_BRIDGE_MAX_RETRIES": "5",
        "LLM_BRIDGE_TRANSCRIPT_DIR": "/tmp/transcripts",
        "LLM_BRIDGE_ENDPOINT": "  ",
    }
    config = BridgeConfig.from_env(env)
    assert config.model == "deepseek-chat"
    assert config.manual_mode is True
    assert config.token_ceiling == 16384
    assert config.history_window == 4
    assert config.max_retries == 5
    assert config.transcript_dir == Path("/tmp/transcripts")
    assert config.endpoint_override is None


def test_from_env_overrides_win_and_none_is_ignored():
    env = {"LLM_BRIDGE_MODEL": "from-env", "LLM_BRIDGE_MAX_RETRIES": "7"}
    config = BridgeConfig.from_env(env, model="from-cli", max_retries=None)
    assert config.model == "from-cli"
    assert config.max_retries == 7


def test_from_env_reads_process_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LLM_BRIDGE_TIMEOUT_MS", "2500")
    assert BridgeConfig.from_env().call_timeout == 2.5
