"""Provider factory: credential and endpoint resolution from the model name."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .config import BridgeConfig
from .errors import MissingCredentialsError
from .openai_provider import OpenAIChatProvider
from .provider import LLMProvider, StubLLMProvider


@dataclass(frozen=True)
class ProviderProfile:
    """One row of the provider strategy table."""

    name: str
    markers: tuple[str, ...]
    credential_env: tuple[str, ...]
    default_endpoint: str | None = None

    def matches(self, model: str) -> bool:
        lower = model.lower()
        return any(marker in lower for marker in self.markers)


# Ordered: the first matching profile wins.
PROFILES: tuple[ProviderProfile, ...] = (
    ProviderProfile(
        name="deepseek",
        markers=("deepseek",),
        credential_env=("DEEPSEEK_API_KEY", "LLM_API_KEY", "OPENAI_API_KEY"),
        default_endpoint="https://api.deepseek.com/v1",
    ),
)

FALLBACK_PROFILE = ProviderProfile(
    name="openai",
    markers=(),
    credential_env=("OPENAI_API_KEY", "LLM_API_KEY"),
)


def resolve_profile(model: str | None) -> ProviderProfile:
    """Return the profile for *model*, or the fallback when nothing matches."""
    if not model:
        return FALLBACK_PROFILE
    for profile in PROFILES:
        if profile.matches(model):
            return profile
    return FALLBACK_PROFILE


def resolve_api_key(
    env_vars: tuple[str, ...] | list[str],
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Return the value of the first variable in *env_vars* that is set."""
    env = os.environ if environ is None else environ
    for var in env_vars:
        value = env.get(var)
        if value:
            return value
    return None


class ProviderFactory:
    """Creates the remote provider for a bridge configuration.

    Resolution logic:
        1. Pick the profile whose marker appears in the model name
           (case-insensitive), else the OpenAI fallback.
        2. Take the API key from the profile's first set variable;
           fail with :class:`MissingCredentialsError` if none is set.
        3. Use ``config.endpoint_override`` if given, else the profile's
           default endpoint.
    """

    @staticmethod
    def create(
        config: BridgeConfig,
        environ: Mapping[str, str] | None = None,
    ) -> LLMProvider:
        model = config.effective_model
        profile = resolve_profile(model)
        api_key = resolve_api_key(profile.credential_env, environ)
        if not api_key:
            raise MissingCredentialsError(profile.credential_env)

        endpoint = config.endpoint_override or profile.default_endpoint
        return OpenAIChatProvider(
            api_key,
            base_url=endpoint,
            provider_name=profile.name,
        )

    @staticmethod
    def describe(provider: LLMProvider | None) -> str:
        """Return a human-readable description of a provider for REPL output."""
        if provider is None:
            return "manual (operator replies)"
        if isinstance(provider, OpenAIChatProvider):
            endpoint = provider.base_url or "default endpoint"
            return f"OpenAIChatProvider (name={provider.name()}, endpoint={endpoint})"
        if isinstance(provider, StubLLMProvider):
            return "StubLLMProvider (deterministic responses)"
        return f"{type(provider).__name__}"
