from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import httpx

from janbot.utils.logger import get_logger

logger = get_logger(__name__)


class BackendAPIError(Exception):
    """A backend call completed with a non-2xx status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error {status_code}: {body}")


def clean_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Drop unset and empty values, stringify the rest."""
    if not params:
        return {}
    return {key: str(value) for key, value in params.items() if value is not None and value != ""}


class AuthenticatedClient:
    """
    Thin wrapper around httpx for calls made on behalf of a user.

    Every request carries `Authorization: Bearer <jwt>`. When no shared
    `http_client` is given, each call opens (and closes) its own connection.

    Example usage:
        client = AuthenticatedClient(jwt, base_url="https://aml.example.com")
        stats = await client.get_json("/api/v1/clients/stats")
    """

    def __init__(
        self,
        jwt: str,
        base_url: str,
        *,
        timeout_s: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._jwt = jwt
        self._http_client = http_client

    def _headers(self, accept_json: bool = True) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._jwt}"}
        if accept_json:
            headers["Accept"] = "application/json"
        return headers

    def url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            yield client

    async def request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        """Send a request and return the raw response, whatever its status."""
        url = self.url(endpoint)
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        async with self._client() as client:
            response = await client.request(method, url, headers=headers, **kwargs)
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    async def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET a JSON resource, raising BackendAPIError on a non-2xx status."""
        response = await self.request("GET", endpoint, params=clean_params(params))
        if not response.is_success:
            raise BackendAPIError(response.status_code, response.text)
        return response.json()

    async def post_json(self, endpoint: str, payload: Any) -> Any:
        """POST a JSON body, raising BackendAPIError on a non-2xx status."""
        response = await self.request("POST", endpoint, json=payload)
        if not response.is_success:
            raise BackendAPIError(response.status_code, response.text)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
