"""
Shared fixtures.

Backends are faked with httpx.MockTransport; nothing here touches the network
or a real model vendor.
"""

from collections.abc import Callable

import httpx
import pytest

from janbot.config.settings import Settings

Handler = Callable[[httpx.Request], httpx.Response]


def make_settings(**overrides: object) -> Settings:
    """Settings that ignore the developer's .env and environment keys."""
    values: dict[str, object] = {
        "OPENAI_API_KEY": "",
        "ANTHROPIC_API_KEY": "",
        "GOOGLE_API_KEY": "",
        "AML_CORE_URL": "https://aml.test",
        "AUTH_SERVICE_URL": "https://auth.test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def mock_client(handler: Handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def openai_only_settings() -> Settings:
    """Only the OpenAI credential is present."""
    return make_settings(OPENAI_API_KEY="sk-test")


@pytest.fixture
def all_providers_settings() -> Settings:
    return make_settings(
        OPENAI_API_KEY="sk-test",
        ANTHROPIC_API_KEY="sk-ant-test",
        GOOGLE_API_KEY="google-test",
    )


@pytest.fixture
def no_provider_settings() -> Settings:
    return make_settings()


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings


@pytest.fixture
def http_client_factory() -> Callable[[Handler], httpx.AsyncClient]:
    """Build an httpx.AsyncClient whose requests are answered by `handler`."""
    return mock_client
