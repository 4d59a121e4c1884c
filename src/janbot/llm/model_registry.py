from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LlmProvider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


@dataclass(frozen=True)
class ModelConfig:
    """Single hosted model offered to the assistant."""

    provider: LlmProvider
    model: str
    display_name: str
    description: str
    max_tokens: int | None = None


# One model per vendor. The set of valid models is exactly this key set.
MODEL_CONFIGS: dict[str, ModelConfig] = {
    "gpt-4o": ModelConfig(
        provider=LlmProvider.OPENAI,
        model="gpt-4o",
        display_name="GPT-4o",
        description="Most capable OpenAI model",
        max_tokens=128_000,
    ),
    "claude-3-5-sonnet-20241022": ModelConfig(
        provider=LlmProvider.ANTHROPIC,
        model="claude-3-5-sonnet-20241022",
        display_name="Claude 3.5 Sonnet",
        description="Best balance of intelligence and speed",
        max_tokens=200_000,
    ),
    "gemini-2.0-flash-exp": ModelConfig(
        provider=LlmProvider.GOOGLE,
        model="gemini-2.0-flash-exp",
        display_name="Gemini 2.0 Flash",
        description="Latest Gemini with fast inference",
        max_tokens=1_000_000,
    ),
}

DEFAULT_MODEL = "gpt-4o"
DEFAULT_PROVIDER = LlmProvider.OPENAI

AVAILABLE_PROVIDERS: list[LlmProvider] = list(LlmProvider)

PROVIDER_DISPLAY_NAMES: dict[LlmProvider, str] = {
    LlmProvider.OPENAI: "OpenAI",
    LlmProvider.ANTHROPIC: "Anthropic",
    LlmProvider.GOOGLE: "Google",
}


def is_valid_model(model_id: str) -> bool:
    return model_id in MODEL_CONFIGS


def get_model_config(model_id: str) -> ModelConfig | None:
    return MODEL_CONFIGS.get(model_id)


def get_provider_for_model(model_id: str) -> LlmProvider | None:
    config = get_model_config(model_id)
    return config.provider if config else None


def get_models_by_provider(provider: LlmProvider | str) -> list[ModelConfig]:
    """All configs served by `provider`; empty for a provider with no models."""
    return [config for config in MODEL_CONFIGS.values() if config.provider == provider]


def get_models_for_provider(provider: LlmProvider | str) -> list[str]:
    """Same filter as get_models_by_provider, returning model ids."""
    return [model_id for model_id, config in MODEL_CONFIGS.items() if config.provider == provider]


def get_model_display_name(model_id: str) -> str:
    config = get_model_config(model_id)
    return config.display_name if config else model_id
