"""
FastAPI dependencies shared by the routes.

Kept as plain functions so tests can swap them via `app.dependency_overrides`.
"""

from fastapi import Depends, Header

from janbot.billing import BillingClient
from janbot.config.settings import Settings, get_settings
from janbot.llm import ProviderRouter, get_router


def get_app_settings() -> Settings:
    return get_settings()


def get_provider_router() -> ProviderRouter:
    return get_router()


def get_bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """JWT from `Authorization: Bearer <jwt>`, or None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer ") :].strip()
    return token or None


def get_billing_client(
    jwt: str | None = Depends(get_bearer_token),
    settings: Settings = Depends(get_app_settings),
) -> BillingClient | None:
    """Billing client for the caller; None for anonymous requests."""
    if jwt is None:
        return None
    return BillingClient(jwt, settings=settings)
