"""
ProviderRouter with logging support.
Resolves a model id to its vendor and hands back a ready pydantic-ai model.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any

from pydantic_ai.models import Model
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers import Provider
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.openai import OpenAIProvider

from janbot.config.settings import Settings, get_settings
from janbot.utils.logger import get_logger

from .model_registry import MODEL_CONFIGS, LlmProvider, ModelConfig

logger = get_logger(__name__)


class ConfigurationError(Exception):
    """Programming or deployment mistake. Retrying with the same input will not help."""


class UnknownModelError(ConfigurationError):
    def __init__(self, model_id: str) -> None:
        self.model_id = model_id
        super().__init__(f"Unknown model: {model_id}")


class UnknownProviderError(ConfigurationError):
    def __init__(self, provider: object) -> None:
        self.provider = provider
        super().__init__(f"Unknown provider: {provider}")


class ProviderNotConfiguredError(ConfigurationError):
    def __init__(self, provider: LlmProvider, env_var: str) -> None:
        self.provider = provider
        self.env_var = env_var
        super().__init__(f"No API key for provider '{provider.value}'. Set {env_var}.")


# Settings attribute holding each vendor's credential.
CREDENTIAL_SETTINGS: dict[LlmProvider, str] = {
    LlmProvider.OPENAI: "OPENAI_API_KEY",
    LlmProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LlmProvider.GOOGLE: "GOOGLE_API_KEY",
}


class ProviderRouter:
    """
    Model id -> vendor client -> invocable model handle.

    Vendor clients (pydantic-ai providers, which own the SDK connection) are
    cached per router instance: built on first use, reused afterwards, and
    rebuilt only when a call passes an explicit API key.

    Usage:

        router = ProviderRouter()
        model = router.get_model(model="claude-3-5-sonnet-20241022")
        agent = Agent(model, system_prompt="...")

        # Offer only what can actually be served
        print(router.get_available_models())  # e.g. ["gpt-4o"]
    """

    def __init__(
        self,
        settings: Settings | None = None,
        configs: Mapping[str, ModelConfig] | None = None,
    ) -> None:
        """
        Args:
            settings: Credentials and default model. Defaults to get_settings().
            configs: Model table. Defaults to MODEL_CONFIGS.
        """
        self._settings = settings or get_settings()
        self._configs: Mapping[str, ModelConfig] = MODEL_CONFIGS if configs is None else configs
        self._clients: dict[LlmProvider, Provider[Any]] = {}

        logger.info(
            f"ProviderRouter initialized: {len(self._configs)} models, "
            f"configured providers={[p.value for p in self.get_configured_providers()]}"
        )

    # ----------------------------------------------------------------
    # Vendor clients
    # ----------------------------------------------------------------

    def _credential(self, provider: LlmProvider) -> str:
        return getattr(self._settings, CREDENTIAL_SETTINGS[provider], "") or ""

    def _get_client(
        self,
        provider: LlmProvider,
        api_key: str | None,
        factory: Callable[[str], Provider[Any]],
    ) -> Provider[Any]:
        cached = self._clients.get(provider)
        if cached is not None and not api_key:
            return cached

        key = api_key or self._credential(provider)
        if not key:
            logger.error(f"Cannot build {provider.value} client: no credential configured")
            raise ProviderNotConfiguredError(provider, CREDENTIAL_SETTINGS[provider])

        client = factory(key)
        self._clients[provider] = client
        logger.debug(
            f"Built {provider.value} client ({'override key' if api_key else 'environment key'})"
        )
        return client

    def get_openai_client(self, api_key: str | None = None) -> Provider[Any]:
        return self._get_client(
            LlmProvider.OPENAI, api_key, lambda key: OpenAIProvider(api_key=key)
        )

    def get_anthropic_client(self, api_key: str | None = None) -> Provider[Any]:
        return self._get_client(
            LlmProvider.ANTHROPIC, api_key, lambda key: AnthropicProvider(api_key=key)
        )

    def get_google_client(self, api_key: str | None = None) -> Provider[Any]:
        return self._get_client(
            LlmProvider.GOOGLE, api_key, lambda key: GoogleProvider(api_key=key)
        )

    # ----------------------------------------------------------------
    # Public API
    # ----------------------------------------------------------------

    @property
    def default_model(self) -> str:
        return self._settings.DEFAULT_MODEL

    def provider_for_model(self, model_id: str) -> LlmProvider:
        """Vendor serving `model_id`. Raises UnknownModelError for ids outside the table."""
        config = self._configs.get(model_id)
        if config is None:
            raise UnknownModelError(model_id)
        return config.provider

    def get_model(
        self,
        model: str | None = None,
        *,
        openai_api_key: str | None = None,
        anthropic_api_key: str | None = None,
        google_api_key: str | None = None,
    ) -> Model:
        """
        Return an invocable model handle for `model` (default: DEFAULT_MODEL).

        Raises:
            UnknownModelError: `model` is not in the model table.
            ProviderNotConfiguredError: the vendor has neither an override nor
                an environment key.

        Example:
            model = router.get_model(model="gpt-4o")
            result = await Agent(model).run("Hola")
        """
        model_id = model or self.default_model
        provider = self.provider_for_model(model_id)
        logger.debug(f"Resolved model {model_id} -> provider {provider.value}")

        if provider is LlmProvider.OPENAI:
            return OpenAIChatModel(model_id, provider=self.get_openai_client(openai_api_key))
        if provider is LlmProvider.ANTHROPIC:
            return AnthropicModel(model_id, provider=self.get_anthropic_client(anthropic_api_key))
        if provider is LlmProvider.GOOGLE:
            return GoogleModel(model_id, provider=self.get_google_client(google_api_key))

        raise UnknownProviderError(provider)

    def is_provider_configured(self, provider: LlmProvider | str) -> bool:
        try:
            return bool(self._credential(LlmProvider(provider)))
        except ValueError:
            return False

    def get_configured_providers(self) -> list[LlmProvider]:
        return [provider for provider in LlmProvider if self.is_provider_configured(provider)]

    def get_available_models(self) -> list[str]:
        """Models whose vendor has a credential: the set to offer end users."""
        configured = set(self.get_configured_providers())
        return [
            model_id for model_id, config in self._configs.items() if config.provider in configured
        ]

    def get_config_summary(self) -> dict[str, dict[str, object]]:
        """Per-provider view of models, configuration state and client cache."""
        summary: dict[str, dict[str, object]] = {}
        for provider in LlmProvider:
            summary[provider.value] = {
                "configured": self.is_provider_configured(provider),
                "client_cached": provider in self._clients,
                "models": [
                    model_id
                    for model_id, config in self._configs.items()
                    if config.provider == provider
                ],
            }
        logger.debug(f"Configuration Summary: {summary}")
        return summary


@lru_cache
def get_router() -> ProviderRouter:
    """Process-wide router built from get_settings()."""
    return ProviderRouter()
