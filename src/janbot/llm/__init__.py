"""
LLM infrastructure for Janbot.

Provides the model table and vendor routing on top of pydantic-ai.
"""

from .model_registry import (
    AVAILABLE_PROVIDERS,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    MODEL_CONFIGS,
    PROVIDER_DISPLAY_NAMES,
    LlmProvider,
    ModelConfig,
    get_model_config,
    get_model_display_name,
    get_models_by_provider,
    get_models_for_provider,
    get_provider_for_model,
    is_valid_model,
)
from .router import (
    ConfigurationError,
    ProviderNotConfiguredError,
    ProviderRouter,
    UnknownModelError,
    UnknownProviderError,
    get_router,
)

__all__ = [
    "AVAILABLE_PROVIDERS",
    "DEFAULT_MODEL",
    "DEFAULT_PROVIDER",
    "MODEL_CONFIGS",
    "PROVIDER_DISPLAY_NAMES",
    "LlmProvider",
    "ModelConfig",
    "get_model_config",
    "get_model_display_name",
    "get_models_by_provider",
    "get_models_for_provider",
    "get_provider_for_model",
    "is_valid_model",
    "ConfigurationError",
    "ProviderNotConfiguredError",
    "ProviderRouter",
    "UnknownModelError",
    "UnknownProviderError",
    "get_router",
]
