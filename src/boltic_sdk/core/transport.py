# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request/response value types and the transport that puts them on the wire.

:class:`RequestsTransport` is the default transport. It wraps the requests
library and runs each blocking call in a worker thread so the event loop stays
free while a request is in flight.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import requests

from .errors import NetworkError, RequestTimeoutError


@dataclass
class HttpRequestConfig:
    """
    A single outbound request as seen by request interceptors.

    :param method: Upper-case HTTP method.
    :type method: str
    :param url: Absolute request URL.
    :type url: str
    :param headers: Request headers. Authentication headers are already present.
    :type headers: dict[str, str]
    :param params: Query string parameters.
    :type params: dict[str, Any]
    :param data: JSON-serializable body, or ``str``/``bytes`` sent verbatim.
    :type data: Any
    :param timeout: Timeout in milliseconds.
    :type timeout: int or None
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    data: Any = None
    timeout: Optional[int] = None

    def copy(self, **changes: Any) -> "HttpRequestConfig":
        """Return a copy with independent header and param dictionaries."""
        clone = replace(self, headers=dict(self.headers), params=dict(self.params))
        return replace(clone, **changes) if changes else clone


@dataclass
class HttpResponse:
    """
    A decoded HTTP response.

    :param status: HTTP status code.
    :type status: int
    :param data: JSON-decoded body, raw text when the body is not JSON, or ``None``.
    :type data: Any
    :param headers: Response headers.
    :type headers: dict[str, str]
    :param status_text: Reason phrase.
    :type status_text: str
    :param request: The request that produced this response.
    :type request: HttpRequestConfig or None
    """

    status: int
    data: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    status_text: str = ""
    request: Optional[HttpRequestConfig] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class HttpTransport(Protocol):
    """Capability that sends one request and returns its response."""

    async def send(self, request: HttpRequestConfig) -> HttpResponse:
        ...

    def close(self) -> None:
        ...


def _decode_body(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class RequestsTransport:
    """
    Transport backed by :mod:`requests`.

    :param session: Optional ``requests.Session`` for connection reuse. When
        omitted the transport creates and owns one.
    :type session: requests.Session or None
    """

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self._session

    async def send(self, request: HttpRequestConfig) -> HttpResponse:
        kwargs: Dict[str, Any] = {"headers": dict(request.headers)}
        if request.params:
            kwargs["params"] = request.params
        if request.timeout:
            kwargs["timeout"] = request.timeout / 1000.0
        if isinstance(request.data, (str, bytes)):
            kwargs["data"] = request.data
        elif request.data is not None:
            kwargs["json"] = request.data

        session = self._get_session()
        context = {"method": request.method, "url": request.url}
        try:
            raw = await asyncio.to_thread(session.request, request.method, request.url, **kwargs)
        except requests.exceptions.Timeout as exc:
            raise RequestTimeoutError(
                f"Request timed out after {request.timeout}ms", timeout=request.timeout, context=context
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise NetworkError(f"HTTP request failed: {exc}", context=context) from exc

        return HttpResponse(
            status=raw.status_code,
            data=_decode_body(raw),
            headers=dict(raw.headers),
            status_text=raw.reason or "",
            request=request,
        )

    def close(self) -> None:
        """Close the owned session. Safe to call multiple times."""
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None


__all__ = ["HttpRequestConfig", "HttpResponse", "HttpTransport", "RequestsTransport"]
