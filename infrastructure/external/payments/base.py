"""
Base payment client implementing shared concerns: http, timeout, logging, error mapping.

Concrete providers subclass and implement provider-specific signing and
operations. Nothing is retried here; retry policy belongs to the caller.
"""
from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx

from core.logging_config import get_logger
from infrastructure.external.payments.exceptions import GatewayError, GatewayErrorCategory


logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class BasePaymentClient:
    provider: str = "base"

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def timeouts(self) -> httpx.Timeout:
        # Per-phase limits; the wall-clock budget is enforced in _post_json
        return httpx.Timeout(self._timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeouts,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close underlying HTTP client if created."""
        if self._client is not None:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def _post_json(self, path: str, body: dict[str, Any], headers: dict[str, str]) -> Any:
        """POST ``body`` and return the decoded JSON of a 2xx answer.

        Every failure is raised as GatewayError; the gateway body is preserved
        on ``raw_response`` whenever one arrived.
        """
        try:
            # Bounds the whole exchange, body included
            response = await asyncio.wait_for(
                self.client.post(path, json=body, headers=headers), self._timeout
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            self._log("gateway_timeout", level="warning", path=path, timeout=self._timeout)
            raise GatewayError(
                f"Request timeout after {self._timeout}s",
                category=GatewayErrorCategory.TIMEOUT,
                provider=self.provider,
            ) from exc
        except httpx.TransportError as exc:
            self._log("gateway_unreachable", level="warning", path=path, error=str(exc))
            raise GatewayError(
                f"Network error: {exc}",
                category=GatewayErrorCategory.UNREACHABLE,
                provider=self.provider,
            ) from exc

        raw = self._decode_body(response)
        if not response.is_success:
            self._log("gateway_rejected", level="warning", path=path, status_code=response.status_code, response=raw)
            raise GatewayError(
                f"{self.provider} API error: HTTP {response.status_code}",
                category=GatewayErrorCategory.REJECTED,
                provider=self.provider,
                status_code=response.status_code,
                raw_response=raw,
            )
        if not isinstance(raw, dict):
            self._log("gateway_malformed_response", level="warning", path=path, status_code=response.status_code)
            raise GatewayError(
                f"{self.provider} API returned a non-object body",
                category=GatewayErrorCategory.REJECTED,
                provider=self.provider,
                status_code=response.status_code,
                raw_response=raw,
            )
        return raw

    @staticmethod
    def _decode_body(response: httpx.Response) -> Any:
        """JSON when the body parses, the text otherwise."""
        try:
            return response.json()
        except ValueError:
            return response.text

    def _log(self, event: str, *, level: str = "info", **kwargs) -> None:
        getattr(logger, level)(
            event,
            provider=self.provider,
            **kwargs,
        )
