# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Helpers for exercising SDK code without a Boltic backend.

:class:`MockTransport` plugs into the ``transport`` option of
:func:`~boltic_sdk.client.create_client` and answers requests locally.

Example::

    transport = MockTransport([HttpResponse(201, {"data": {"id": "t-1", "name": "orders"}})])
    client = create_test_client(transport=transport)

    result = await client.tables.create({"name": "orders"})
    assert transport.requests[0].method == "POST"
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Iterable, List, Optional, Union

from .client import BolticClient
from .core.config import Environment
from .core.results import PaginationInfo
from .core.transport import HttpRequestConfig, HttpResponse

TEST_API_KEY = "test-api-key-12345"

Handler = Callable[[HttpRequestConfig], Any]


class MockTransport:
    """
    In-memory transport that records requests and replays canned responses.

    :param responses: Either a callable ``handler(request) -> HttpResponse``
        (sync or async), or an iterable of responses served in order. Items that
        are exceptions are raised instead of returned. When omitted every request
        gets an empty ``200`` response.
    :param hang: When true, :meth:`send` never completes. Useful for exercising timeouts.
    :type hang: bool
    """

    def __init__(
        self,
        responses: Union[Handler, Iterable[Union[HttpResponse, BaseException]], None] = None,
        *,
        hang: bool = False,
    ) -> None:
        self._handler: Optional[Handler] = responses if callable(responses) else None
        self._queue: List[Union[HttpResponse, BaseException]] = (
            [] if responses is None or callable(responses) else list(responses)
        )
        self._hang = hang
        self.requests: List[HttpRequestConfig] = []
        self.closed = False

    async def send(self, request: HttpRequestConfig) -> HttpResponse:
        self.requests.append(request.copy())
        if self._hang:
            await asyncio.Event().wait()

        if self._handler is not None:
            outcome = self._handler(request)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        elif self._queue:
            outcome = self._queue.pop(0)
        else:
            outcome = HttpResponse(200, {"data": None})

        if isinstance(outcome, BaseException):
            raise outcome
        if outcome.request is None:
            outcome.request = request
        return outcome

    def queue(self, *responses: Union[HttpResponse, BaseException]) -> None:
        """Append responses (or exceptions to raise) to the replay queue."""
        self._queue.extend(responses)

    def close(self) -> None:
        self.closed = True

    @property
    def last_request(self) -> Optional[HttpRequestConfig]:
        return self.requests[-1] if self.requests else None


def create_test_client(
    *,
    api_key: str = TEST_API_KEY,
    transport: Optional[MockTransport] = None,
    **options: Any,
) -> BolticClient:
    """
    Build a client for the local environment backed by a :class:`MockTransport`.

    Retries are disabled unless ``retry_attempts`` is passed.
    """
    options.setdefault("environment", Environment.LOCAL)
    options.setdefault("retry_attempts", 0)
    return BolticClient(api_key, transport=transport if transport is not None else MockTransport(), **options)


def create_mock_response(data: Any, pagination: Optional[PaginationInfo] = None, status: int = 200) -> HttpResponse:
    """Wrap ``data`` in the API's success envelope."""
    body = {"data": data}
    if pagination is not None:
        body["pagination"] = {
            "current_page": pagination.current_page,
            "total_pages": pagination.total_pages,
            "total_count": pagination.total_count,
            "per_page": pagination.page_size,
        }
    return HttpResponse(status, body)


def create_error_response(error: str, details: Any = None, status: int = 400) -> HttpResponse:
    """Build a response carrying the API's error envelope."""
    return HttpResponse(status, {"data": {}, "error": {"message": error, "meta": details}})


__all__ = [
    "MockTransport",
    "TEST_API_KEY",
    "create_test_client",
    "create_mock_response",
    "create_error_response",
]
