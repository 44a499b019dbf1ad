"""Session manager: the bridge between a caller and the remote LLM."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from .config import BridgeConfig
from .conversation import ConversationStore
from .errors import BridgeError
from .executor import RemoteCallExecutor
from .manual import ConsoleReplyChannel, ReplyChannel
from .provider import ChatMessage, LLMProvider
from .provider_factory import ProviderFactory
from .retry import RetryController, SleepFn
from .telemetry import trace_submit
from .template import PromptTemplate
from .token_budget import TiktokenCounter, TokenBudgetEnforcer, TokenCounter
from .transcript import TranscriptSink

logger = logging.getLogger(__name__)


class LLMBridge:
    """One logical conversation with a remote LLM.

    The bridge keeps the full history but only sends a sliding window of it.
    Once the history outgrows the window, the template's explanatory message
    is sent ahead of the window so the model never loses its instructions.
    Calls on one bridge must not overlap.
    """

    def __init__(
        self,
        session_id: str,
        template: PromptTemplate,
        config: BridgeConfig | None = None,
        *,
        provider: LLMProvider | None = None,
        reply_channel: ReplyChannel | None = None,
        transcript: TranscriptSink | None = None,
        counter: TokenCounter | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._config = config or BridgeConfig()
        self._session_id = session_id
        self._template = template
        self._store = ConversationStore()
        self._model = self._config.effective_model
        self._enforcer = TokenBudgetEnforcer(counter or TiktokenCounter(self._model))

        self._provider: LLMProvider | None = None
        self._retry: RetryController | None = None
        self._channel: ReplyChannel | None = None

        if self._config.manual_mode:
            self._channel = reply_channel or ConsoleReplyChannel(
                copy_to_clipboard=self._config.copy_to_clipboard
            )
        else:
            self._provider = provider or ProviderFactory.create(self._config)
            self._retry = RetryController(
                RemoteCallExecutor(self._provider),
                self._enforcer,
                max_retries=self._config.max_retries,
                initial_delay=self._config.initial_retry_delay,
                timeout=self._config.call_timeout,
                sleep=sleep,
            )

        self._transcript = transcript or TranscriptSink.create(
            self._config.transcript_dir, session_id
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def model(self) -> str:
        return self._model

    @property
    def config(self) -> BridgeConfig:
        return self._config

    @property
    def provider(self) -> LLMProvider | None:
        return self._provider

    @property
    def history(self) -> list[ChatMessage]:
        return self._store.messages

    @property
    def transcript(self) -> TranscriptSink:
        return self._transcript

    @property
    def retry_controller(self) -> RetryController | None:
        return self._retry

    # ------------------------------------------------------------------
    # History management
    # ------------------------------------------------------------------

    def clear_history(self) -> None:
        self._store.clear()

    def remove_last_entry(self) -> ChatMessage | None:
        return self._store.remove_last()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def submit_prompt(self, prompt: str) -> str:
        """Send *prompt* with the windowed history and record the reply.

        If the call fails, the prompt is retracted from the history before
        the error propagates.
        """
        with trace_submit(self._session_id):
            messages = self._build_messages(prompt)
            user_message = messages[-1]
            self._store.append(user_message)

            try:
                reply = await self._request(messages)
            except BaseException:
                self._store.remove_last()
                raise

            self._store.append(ChatMessage.assistant(reply))
            self._transcript.record(user_message.content, reply)
            return reply

    async def submit_prompt_stateless(self, prompt: str) -> str:
        """Send *prompt* alone, without reading or writing the history."""
        with trace_submit(self._session_id, stateless=True):
            user_message = ChatMessage.user(self._template.explanatory_message() + prompt)
            reply = await self._request([user_message], enforce_budget=False)
            self._transcript.record(user_message.content, reply)
            return reply

    def _build_messages(self, prompt: str) -> list[ChatMessage]:
        window = self._config.history_window
        explanation = self._template.explanatory_message()
        messages: list[ChatMessage] = []

        # The explanatory message stays first even after it slides out of the window
        if len(self._store) > window:
            messages.append(ChatMessage.user(explanation))
        messages.extend(self._store.windowed_tail(window))

        if len(self._store) == 0:
            prompt = explanation + prompt
        messages.append(ChatMessage.user(prompt))
        return messages

    async def _request(self, messages: list[ChatMessage], enforce_budget: bool = True) -> str:
        if self._channel is not None:
            return await self._channel.ask(messages[-1].content)

        if self._retry is None:
            msg = "Bridge has neither a reply channel nor a remote provider"
            raise BridgeError(msg)
        if enforce_budget:
            removed = self._enforcer.ensure_fits(messages, self._config.token_ceiling)
            if removed:
                logger.debug("Sending %d message(s) after dropping %d", len(messages), removed)
        return await self._retry.run(messages, self._model)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._transcript.close()

    async def __aenter__(self) -> LLMBridge:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
