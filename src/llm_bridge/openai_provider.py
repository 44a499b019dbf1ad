"""OpenAI-compatible chat completion provider."""

from __future__ import annotations

from openai import AsyncOpenAI

from .provider import ChatRequest, ChatResponse, LLMProvider, TokenUsage


class OpenAIChatProvider(LLMProvider):
    """LLM provider backed by any OpenAI-compatible ``chat.completions`` endpoint.

    DeepSeek and other compatible services are reached by passing their
    ``base_url``; ``None`` keeps the SDK default endpoint.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        provider_name: str = "openai",
        client: AsyncOpenAI | None = None,
    ) -> None:
        if client is None:
            if api_key is None:
                raise ValueError("api_key or client must be provided")
            client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._client = client
        self._base_url = base_url
        self._name = provider_name

    def name(self) -> str:
        return self._name

    @property
    def base_url(self) -> str | None:
        return self._base_url

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Send the messages and return the first choice's content."""
        completion = await self._client.chat.completions.create(
            model=request.model,
            messages=[m.model_dump(mode="json") for m in request.messages],
        )
        content = completion.choices[0].message.content or ""
        usage = None
        if completion.usage is not None:
            usage = TokenUsage(
                prompt_tokens=completion.usage.prompt_tokens,
                completion_tokens=completion.usage.completion_tokens,
            )
        return ChatResponse(content=content, usage=usage)
