"""Shared transport for providers that speak plain JSON over HTTP."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from layr.errors import ProviderErrorKind, classify_status
from layr.llm.providers.base import LLMProvider, ProviderConfig

logger = logging.getLogger(__name__)

# Generation has no deadline; callers impose their own cancellation
GENERATE_TIMEOUT = httpx.Timeout(None, connect=10.0)
PROBE_TIMEOUT = httpx.Timeout(5.0)


class HTTPProvider(LLMProvider):
    """Base for adapters that call a JSON endpoint with httpx."""

    def __init__(
        self,
        config: ProviderConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config)
        self._http_client = http_client

    @asynccontextmanager
    async def _client(self, timeout: httpx.Timeout) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected client, or a short-lived one."""
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=timeout) as client:
            yield client

    def _network_error_message(self) -> str | None:
        """Adapter-specific message for an unreachable endpoint."""
        return None

    def _status_error_message(self, status_code: int, body: Any) -> str | None:
        """Adapter-specific message for a failed status, or None for default."""
        return None

    async def _post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON payload and return the decoded JSON object.

        Raises:
            ProviderError: On transport failure, non-success status or a body
                that is not a JSON object.
        """
        try:
            async with self._client(GENERATE_TIMEOUT) as client:
                response = await client.post(url, json=payload)
        except httpx.TimeoutException as e:
            logger.warning("%s request timed out", self.display_name)
            raise self.error(ProviderErrorKind.TIMEOUT) from e
        except httpx.HTTPError as e:
            logger.warning(
                "%s transport error: %s", self.display_name, type(e).__name__
            )
            raise self.error(
                ProviderErrorKind.NETWORK, self._network_error_message()
            ) from e

        try:
            body: Any = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            logger.warning(
                "%s request failed with HTTP %d",
                self.display_name,
                response.status_code,
            )
            raise self.error(
                classify_status(response.status_code),
                self._status_error_message(response.status_code, body),
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            raise self.error(ProviderErrorKind.INVALID_RESPONSE)
        return body

    async def _probe(self, url: str, headers: dict[str, str] | None = None) -> bool:
        """GET a URL and report whether it answered successfully."""
        try:
            async with self._client(PROBE_TIMEOUT) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.info("%s probe failed: %s", self.display_name, type(e).__name__)
            return False
        return response.is_success
