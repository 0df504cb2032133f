"""HTTP transport for control plane API calls."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from photonctl.config.models import RetryConfig
from photonctl.constants import LOGGER_NAME
from photonctl.errors import APIError, RequestError, ResourceNotFoundError
from photonctl.http.retry import RetryPolicy

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})

TokenProvider = Callable[[bool], Awaitable[str | None]]

logger = logging.getLogger(f"{LOGGER_NAME}.http")


def _error_from_response(response: httpx.Response, *, fallback: str) -> APIError:
    """Build an APIError from the control plane's {code, message, data} error body."""

    body = response.text.strip() or None
    message = fallback
    code: str | None = None
    if body:
        try:
            decoded = json.loads(body)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            message = str(decoded.get("message") or fallback)
            raw_code = decoded.get("code")
            code = str(raw_code) if raw_code else None

    error_type = ResourceNotFoundError if response.status_code == 404 else APIError
    return error_type(status_code=response.status_code, message=message, code=code, body=body)


class PhotonTransport:
    """Async transport handling retries and authenticated requests."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float,
        verify_tls: bool,
        retry_config: RetryConfig,
        token_provider: TokenProvider,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.retry = RetryPolicy(retry_config)
        self._token_provider = token_provider
        self._owns_http_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            verify=verify_tls,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._client.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str | int | float | bool] | None = None,
        json_data: Mapping[str, Any] | None = None,
        form_data: Mapping[str, Any] | None = None,
        content_type: str = "application/json",
        authenticated: bool = True,
        extra_headers: Mapping[str, str] | None = None,
        idempotent: bool | None = None,
    ) -> dict[str, Any]:
        method_upper = method.upper()
        if idempotent is None:
            idempotent = method_upper in IDEMPOTENT_METHODS
        attempts = max(1, self.retry.config.max_attempts)
        force_refresh = False

        for attempt in range(1, attempts + 1):
            headers: dict[str, str] = {"Accept": "application/json"}
            if content_type and (json_data is not None or form_data is not None):
                headers["Content-Type"] = content_type
            if extra_headers:
                headers.update(extra_headers)
            if authenticated:
                token = await self._token_provider(force_refresh)
                if token:
                    headers["Authorization"] = f"Bearer {token}"
                force_refresh = False

            logger.debug("%s %s (attempt %d/%d)", method_upper, path, attempt, attempts)
            try:
                response = await self._client.request(
                    method_upper,
                    path,
                    params=params,
                    json=json_data,
                    data=form_data,
                    headers=headers,
                )
            except httpx.HTTPError as exc:
                if self.retry.should_retry_exception(exc, idempotent=idempotent) and attempt < attempts:
                    logger.debug("%s %s failed with %s, retrying", method_upper, path, exc)
                    await self.retry.wait(attempt)
                    continue
                raise RequestError(f"request failed after retries: {exc}") from exc

            logger.debug("%s %s -> %d", method_upper, path, response.status_code)

            if authenticated and response.status_code in {401, 403} and attempt < attempts:
                force_refresh = True
                continue

            if response.status_code == 429 or response.status_code >= 500:
                retryable = self.retry.should_retry_status(response.status_code, idempotent=idempotent)
                if retryable and attempt < attempts:
                    await self.retry.wait(attempt)
                    continue
                raise _error_from_response(response, fallback="transient upstream error")

            if response.status_code >= 400:
                raise _error_from_response(response, fallback="request failed")

            if response.status_code == 204 or not response.text.strip():
                return {}

            try:
                decoded = response.json()
            except ValueError as exc:
                raise RequestError("response was not valid JSON") from exc

            if not isinstance(decoded, dict):
                raise RequestError("response payload must be a JSON object")

            return decoded

        raise RequestError("request failed without a captured error")
