"""
Billing backend client.

Reports chat token consumption and reads the organization's quota. Every
call here is best effort: failures are logged and turned into return values,
never raised, so a billing outage can't end a conversation.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from janbot.config.settings import Settings, get_settings
from janbot.utils.http import AuthenticatedClient, BackendAPIError
from janbot.utils.logger import get_logger

from .usage import TokenUsage, UsageTracker, create_usage_tracker

logger = get_logger(__name__)

USAGE_ENDPOINT = "/api/chat/usage"


class UsageSnapshot(BaseModel):
    """Current billing period usage as reported by the billing backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    used: int
    included: int
    remaining: int
    period_start: str | None = None
    period_end: str | None = None
    overage_count: int = 0

    def to_tracker(self) -> UsageTracker:
        return create_usage_tracker(self.included, self.used)


class TokenUsageResponse(BaseModel):
    """Outcome of a usage lookup: `data` on success, `error` otherwise."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    data: UsageSnapshot | None = None
    error: str | None = None


def _error_message(exc: BackendAPIError) -> str:
    try:
        body: Any = json.loads(exc.body)
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Failed to get token usage: {exc.status_code}"


class BillingClient:
    """
    Usage-metering client for one caller (one JWT).

    Example:
        billing = BillingClient(jwt)
        if await billing.has_remaining_tokens():
            ...
            await billing.report_token_usage(calculate_total_tokens(812, 240))
    """

    def __init__(
        self,
        jwt: str,
        *,
        settings: Settings | None = None,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._api = AuthenticatedClient(
            jwt,
            base_url or settings.AUTH_SERVICE_URL,
            timeout_s=settings.HTTP_TIMEOUT_S,
            http_client=http_client,
        )

    async def report_token_usage(self, usage: TokenUsage) -> bool:
        """POST a usage record. Returns False on any failure."""
        try:
            await self._api.post_json(USAGE_ENDPOINT, usage.model_dump(by_alias=True))
        except BackendAPIError as e:
            logger.error(f"Failed to report token usage: {e.status_code}")
            return False
        except Exception as e:
            logger.error(f"Error reporting token usage: {e}")
            return False

        logger.debug(f"Reported token usage: total={usage.total_tokens}")
        return True

    async def get_token_usage(self) -> TokenUsageResponse:
        """GET the current period's usage snapshot."""
        try:
            payload = await self._api.get_json(USAGE_ENDPOINT)
        except BackendAPIError as e:
            logger.warning(f"Usage lookup rejected by billing backend: {e.status_code}")
            return TokenUsageResponse(success=False, error=_error_message(e))
        except Exception as e:
            logger.warning(f"Usage lookup failed: {e}")
            return TokenUsageResponse(success=False, error=str(e) or type(e).__name__)

        # The backend wraps the snapshot as {"success": ..., "data": {...}}
        raw = payload.get("data", payload) if isinstance(payload, dict) else payload
        try:
            snapshot = UsageSnapshot.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Malformed usage payload: {e.error_count()} validation errors")
            return TokenUsageResponse(success=False, error="Malformed usage response")

        return TokenUsageResponse(success=True, data=snapshot)

    async def has_remaining_tokens(self) -> bool:
        """
        Fail open: only an explicit `remaining <= 0` from the backend blocks.
        An unreachable or broken billing backend allows the request.
        """
        usage = await self.get_token_usage()
        if not usage.success or usage.data is None:
            logger.warning(f"Usage check unavailable, allowing request: {usage.error}")
            return True
        return usage.data.remaining > 0
