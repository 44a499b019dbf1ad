"""LLM Bridge: bounded, retrying conversations with a remote LLM."""

from __future__ import annotations

__version__ = "0.1.0"

from .bridge import LLMBridge
from .config import ADVANCED_MODEL, DEFAULT_MODEL, BridgeConfig
from .conversation import ConversationStore
from .errors import (
    BridgeError,
    BudgetExhaustedError,
    ClipboardError,
    MissingCredentialsError,
    RetriesExhaustedError,
)
from .executor import (
    AttemptFailure,
    AttemptOutcome,
    AttemptSuccess,
    AttemptTimeout,
    RemoteCallExecutor,
)
from .manual import ConsoleReplyChannel, ReplyChannel
from .openai_provider import OpenAIChatProvider
from .provider import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ChatRole,
    LLMProvider,
    StubLLMProvider,
    TokenUsage,
)
from .provider_factory import ProviderFactory, ProviderProfile, resolve_api_key, resolve_profile
from .retry import RetryController, RetryPhase, RetryState
from .telemetry import BridgeTracer, TelemetryConfig, trace_attempt, trace_submit
from .template import PromptTemplate, StaticTemplate
from .token_budget import (
    HeuristicCounter,
    TiktokenCounter,
    TokenBudgetEnforcer,
    TokenCounter,
    estimate_tokens,
)
from .transcript import TranscriptSink

__all__ = [
    "ADVANCED_MODEL",
    "AttemptFailure",
    "AttemptOutcome",
    "AttemptSuccess",
    "AttemptTimeout",
    "BridgeConfig",
    "BridgeError",
    "BridgeTracer",
    "BudgetExhaustedError",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ChatRole",
    "ClipboardError",
    "ConsoleReplyChannel",
    "ConversationStore",
    "DEFAULT_MODEL",
    "HeuristicCounter",
    "LLMBridge",
    "LLMProvider",
    "MissingCredentialsError",
    "OpenAIChatProvider",
    "PromptTemplate",
    "ProviderFactory",
    "ProviderProfile",
    "RemoteCallExecutor",
    "ReplyChannel",
    "RetriesExhaustedError",
    "RetryController",
    "RetryPhase",
    "RetryState",
    "StaticTemplate",
    "StubLLMProvider",
    "TelemetryConfig",
    "TiktokenCounter",
    "TokenBudgetEnforcer",
    "TokenCounter",
    "TokenUsage",
    "TranscriptSink",
    "estimate_tokens",
    "resolve_api_key",
    "resolve_profile",
    "trace_attempt",
    "trace_submit",
]
