# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Asynchronous HTTP client with authentication, interceptors, retries and timeouts.

This module provides :class:`HttpClient`. Every call goes through the same
pipeline::

    auth headers -> request interceptors -> transport -> response interceptors

Transport failures, timeouts and non-2xx responses are normalized into
:class:`~boltic_sdk.core.errors.BolticError` subclasses and routed through the
response error handlers before reaching the caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Mapping, Optional

from ..common.constants import CONTENT_TYPE_JSON, HEADER_ACCEPT, HEADER_BOLTIC_TOKEN, HEADER_CONTENT_TYPE, TRANSIENT_STATUS_CODES
from .auth import AuthManager
from .config import DEFAULT_TIMEOUT_MS, ClientConfig
from .errors import BolticError, HttpError, NetworkError, RequestTimeoutError
from .interceptors import ErrorInterceptor, InterceptorManager, RequestInterceptor, ResponseInterceptor
from .transport import HttpRequestConfig, HttpResponse, HttpTransport, RequestsTransport

_logger = logging.getLogger(__name__)

_MAX_BACKOFF_SECONDS = 60.0


def _redact(headers: Mapping[str, str]) -> Dict[str, str]:
    return {k: ("***" if k.lower() == HEADER_BOLTIC_TOKEN else v) for k, v in headers.items()}


def _error_message(status: int, body: Any) -> str:
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, dict):
                value = value.get("message")
            if isinstance(value, str) and value:
                return value
    return f"HTTP {status} error"


def _retry_after(headers: Mapping[str, str]) -> Optional[int]:
    for name, value in headers.items():
        if name.lower() == "retry-after":
            try:
                return int(value)
            except (TypeError, ValueError):
                return None
    return None


class HttpClient:
    """
    HTTP client that authenticates, intercepts and dispatches Boltic API calls.

    :param config: Client configuration snapshot (base URL, timeout, retries, headers, debug).
    :type config: ~boltic_sdk.core.config.ClientConfig
    :param auth: Authentication manager supplying the ``x-boltic-token`` header.
    :type auth: ~boltic_sdk.core.auth.AuthManager
    :param transport: Transport used to send requests. Defaults to a
        :class:`~boltic_sdk.core.transport.RequestsTransport` owned by this client.
    :type transport: ~boltic_sdk.core.transport.HttpTransport or None
    """

    def __init__(
        self,
        config: ClientConfig,
        auth: AuthManager,
        *,
        transport: Optional[HttpTransport] = None,
    ) -> None:
        self._config = config
        self._auth = auth
        self._owns_transport = transport is None
        self._transport: HttpTransport = transport if transport is not None else RequestsTransport()
        self.interceptors = InterceptorManager()

    # ------------------------------------------------------------------ config

    def get_config(self) -> ClientConfig:
        return self._config

    def update_config(self, config: Optional[ClientConfig] = None, **changes: Any) -> ClientConfig:
        """
        Swap in a new configuration snapshot; in-flight requests keep the old one.

        Pass either a complete snapshot or individual field ``changes`` to merge
        into the current one.

        :return: The snapshot now in effect.
        :rtype: ~boltic_sdk.core.config.ClientConfig
        """
        if config is None:
            config = self._config.merge(**changes)
        elif changes:
            config = config.merge(**changes)
        self._config = config
        return config

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    # ------------------------------------------------------------ interceptors

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> int:
        return self.interceptors.add_request_interceptor(interceptor)

    def add_response_interceptor(
        self,
        on_success: Optional[ResponseInterceptor] = None,
        on_error: Optional[ErrorInterceptor] = None,
    ) -> int:
        return self.interceptors.add_response_interceptor(on_success, on_error)

    def remove_interceptor(self, kind: str, interceptor_id: int) -> None:
        self.interceptors.remove_interceptor(kind, interceptor_id)

    # ---------------------------------------------------------------- requests

    async def get(self, path: str, *, params=None, headers=None, timeout: Optional[int] = None) -> HttpResponse:
        return await self.request("GET", path, params=params, headers=headers, timeout=timeout)

    async def post(self, path: str, data: Any = None, *, params=None, headers=None, timeout: Optional[int] = None) -> HttpResponse:
        return await self.request("POST", path, data=data, params=params, headers=headers, timeout=timeout)

    async def put(self, path: str, data: Any = None, *, params=None, headers=None, timeout: Optional[int] = None) -> HttpResponse:
        return await self.request("PUT", path, data=data, params=params, headers=headers, timeout=timeout)

    async def patch(self, path: str, data: Any = None, *, params=None, headers=None, timeout: Optional[int] = None) -> HttpResponse:
        return await self.request("PATCH", path, data=data, params=params, headers=headers, timeout=timeout)

    async def delete(self, path: str, *, params=None, headers=None, timeout: Optional[int] = None) -> HttpResponse:
        return await self.request("DELETE", path, params=params, headers=headers, timeout=timeout)

    async def request(
        self,
        method: str,
        path: str,
        *,
        data: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[int] = None,
    ) -> HttpResponse:
        """
        Send a request through the interceptor pipeline.

        :param method: HTTP method (GET, POST, PUT, PATCH, DELETE).
        :type method: str
        :param path: Path relative to the configured base URL, or an absolute URL.
        :type path: str
        :param data: Request body; dicts and lists are sent as JSON.
        :param params: Query string parameters.
        :param headers: Per-call headers, applied after the default and auth headers.
        :param timeout: Timeout in milliseconds for this call; defaults to the configured timeout.
        :return: The response returned by the last response interceptor.
        :rtype: ~boltic_sdk.core.transport.HttpResponse
        :raises ~boltic_sdk.core.errors.BolticError: When the call fails and no
            error interceptor recovers it.
        """
        config = self._config
        request = self._build_request(config, method, path, data, params, headers, timeout)

        response: Optional[HttpResponse] = None
        error: Optional[BaseException] = None
        try:
            request = await self.interceptors.run_request(
                request, is_request=lambda value: isinstance(value, HttpRequestConfig)
            )
            self._ensure_auth(request)
            response = await self._send_with_retries(config, request)
        except BolticError as exc:
            error = exc

        return await self.interceptors.run_response(
            response, error, is_response=lambda value: isinstance(value, HttpResponse)
        )

    def _build_request(
        self,
        config: ClientConfig,
        method: str,
        path: str,
        data: Any,
        params: Optional[Mapping[str, Any]],
        headers: Optional[Mapping[str, str]],
        timeout: Optional[int],
    ) -> HttpRequestConfig:
        merged = {HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON, HEADER_ACCEPT: CONTENT_TYPE_JSON}
        merged.update(config.headers)
        merged.update(self._auth.get_auth_headers())
        merged.update(headers or {})
        return HttpRequestConfig(
            method=(method or "").upper(),
            url=self._build_url(config, path),
            headers=merged,
            params=dict(params or {}),
            data=data,
            timeout=timeout or config.timeout or DEFAULT_TIMEOUT_MS,
        )

    @staticmethod
    def _build_url(config: ClientConfig, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if path and not path.startswith("/"):
            path = "/" + path
        return f"{config.base_url}{path}"

    def _ensure_auth(self, request: HttpRequestConfig) -> None:
        # Interceptors may rewrite the token but never drop it.
        has_token = any(
            name.lower() == HEADER_BOLTIC_TOKEN and value for name, value in request.headers.items()
        )
        if not has_token:
            request.headers.update(self._auth.get_auth_headers())

    async def _send_with_retries(self, config: ClientConfig, request: HttpRequestConfig) -> HttpResponse:
        max_retries = config.retry_attempts
        for attempt in range(max_retries + 1):
            try:
                return await self._send(config, request)
            except (HttpError, NetworkError) as exc:
                if not exc.is_transient or attempt == max_retries:
                    raise
                delay = self._calculate_retry_delay(config, attempt, exc)
                _logger.info(
                    "Retrying %s %s after %s (attempt %d of %d, waiting %.2fs)",
                    request.method,
                    request.url,
                    exc.subcode or exc.code,
                    attempt + 1,
                    max_retries,
                    delay,
                )
                await asyncio.sleep(delay)
        raise RuntimeError("Unexpected end of retry loop")

    @staticmethod
    def _calculate_retry_delay(config: ClientConfig, attempt: int, error: BolticError) -> float:
        """
        Seconds to wait before retry ``attempt`` (zero based).

        A ``Retry-After`` header on the failed response wins; otherwise the delay
        is ``retry_delay * 2**attempt`` milliseconds. Both are capped at 60 seconds.
        """
        retry_after = error.context.get("retry_after")
        if retry_after is not None:
            return float(min(retry_after, _MAX_BACKOFF_SECONDS))
        delay = (config.retry_delay / 1000.0) * (2**attempt)
        return min(delay, _MAX_BACKOFF_SECONDS)

    async def _send(self, config: ClientConfig, request: HttpRequestConfig) -> HttpResponse:
        context = {"method": request.method, "url": request.url}
        if config.debug:
            _logger.debug("HTTP request %s %s headers=%s", request.method, request.url, _redact(request.headers))

        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(self._transport.send(request), timeout=request.timeout / 1000.0)
        except BolticError:
            raise
        except asyncio.TimeoutError as exc:
            raise RequestTimeoutError(
                f"Request timed out after {request.timeout}ms", timeout=request.timeout, context=context
            ) from exc
        except Exception as exc:
            raise NetworkError(f"Network request failed: {exc}", context=context) from exc
        duration_ms = (time.perf_counter() - started) * 1000

        if response.request is None:
            response.request = request
        if config.debug:
            level = logging.WARNING if response.status >= 400 else logging.DEBUG
            _logger.log(level, "HTTP response %s %s %s %.1fms", request.method, request.url, response.status, duration_ms)

        if not response.ok:
            context["duration_ms"] = round(duration_ms, 1)
            retry_after = _retry_after(response.headers)
            if retry_after is not None:
                context["retry_after"] = retry_after
            raise HttpError(
                _error_message(response.status, response.data),
                response.status,
                response=response.data,
                status_text=response.status_text,
                is_transient=response.status in TRANSIENT_STATUS_CODES,
                context=context,
            )
        return response

    def close(self) -> None:
        """Close the transport if this client created it. Safe to call multiple times."""
        if self._owns_transport:
            self._transport.close()


__all__ = ["HttpClient"]
