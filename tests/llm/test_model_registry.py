"""
Tests for the model registry: the static table of supported models.
"""

from janbot.llm import (
    AVAILABLE_PROVIDERS,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    MODEL_CONFIGS,
    PROVIDER_DISPLAY_NAMES,
    LlmProvider,
    get_model_config,
    get_model_display_name,
    get_models_by_provider,
    get_models_for_provider,
    get_provider_for_model,
    is_valid_model,
)


class TestModelTable:
    """The table itself."""

    def test_default_model_is_registered(self):
        assert DEFAULT_MODEL in MODEL_CONFIGS
        assert MODEL_CONFIGS[DEFAULT_MODEL].provider is DEFAULT_PROVIDER

    def test_every_provider_has_a_display_name(self):
        assert set(PROVIDER_DISPLAY_NAMES) == set(AVAILABLE_PROVIDERS)

    def test_key_matches_vendor_model_name(self):
        for model_id, config in MODEL_CONFIGS.items():
            assert config.model == model_id

    def test_context_windows(self):
        assert MODEL_CONFIGS["gpt-4o"].max_tokens == 128_000
        assert MODEL_CONFIGS["claude-3-5-sonnet-20241022"].max_tokens == 200_000
        assert MODEL_CONFIGS["gemini-2.0-flash-exp"].max_tokens == 1_000_000


class TestLookups:
    """Lookup helpers."""

    def test_is_valid_model(self):
        assert is_valid_model("gpt-4o")
        assert not is_valid_model("gpt-3")
        assert not is_valid_model("")

    def test_get_model_config_unknown_is_none(self):
        assert get_model_config("gpt-3") is None

    def test_provider_for_model(self):
        assert get_provider_for_model("gpt-4o") is LlmProvider.OPENAI
        assert get_provider_for_model("claude-3-5-sonnet-20241022") is LlmProvider.ANTHROPIC
        assert get_provider_for_model("gemini-2.0-flash-exp") is LlmProvider.GOOGLE
        assert get_provider_for_model("gpt-3") is None

    def test_models_by_provider(self):
        configs = get_models_by_provider(LlmProvider.ANTHROPIC)
        assert [c.model for c in configs] == ["claude-3-5-sonnet-20241022"]

    def test_models_by_provider_accepts_string(self):
        assert get_models_for_provider("google") == ["gemini-2.0-flash-exp"]

    def test_models_by_unknown_provider_is_empty(self):
        assert get_models_by_provider("mistral") == []
        assert get_models_for_provider("mistral") == []

    def test_display_name_falls_back_to_id(self):
        assert get_model_display_name("gpt-4o") == "GPT-4o"
        assert get_model_display_name("custom-model") == "custom-model"
