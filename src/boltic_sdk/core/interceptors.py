# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request and response interceptor chains.

Each :class:`HttpClient <boltic_sdk.core.http.HttpClient>` owns one
:class:`InterceptorManager` holding two independent chains. Hooks may be plain
functions or coroutine functions; the chain awaits each one before invoking the
next, so invocation order is always registration order.
"""

from __future__ import annotations

import inspect
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Iterator, List, Optional, Tuple, TypeVar, Union

from .errors import BolticError, InterceptorError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

RequestInterceptor = Callable[[Any], Union[Any, Awaitable[Any]]]
ResponseInterceptor = Callable[[Any], Union[Any, Awaitable[Any]]]
ErrorInterceptor = Callable[[BaseException], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class ResponseHandlers:
    """Paired success/error hooks registered as a single response interceptor."""

    on_success: Optional[ResponseInterceptor] = None
    on_error: Optional[ErrorInterceptor] = None


class InterceptorChain(Generic[T]):
    """
    Ordered collection of hooks addressed by integer ids.

    Ids start at 1 and increase monotonically; they are never reused within a
    chain. Iteration yields ``(id, entry)`` pairs in registration order.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._entries: List[Tuple[int, T]] = []
        self._ids = itertools.count(1)

    def use(self, entry: T) -> int:
        interceptor_id = next(self._ids)
        self._entries.append((interceptor_id, entry))
        return interceptor_id

    def eject(self, interceptor_id: int) -> None:
        """Remove the entry with ``interceptor_id``; unknown ids are ignored."""
        for index, (existing_id, _) in enumerate(self._entries):
            if existing_id == interceptor_id:
                del self._entries[index]
                return
        _logger.debug("No %s interceptor with id %s to remove", self.kind, interceptor_id)

    def clear(self) -> None:
        self._entries.clear()

    def ids(self) -> List[int]:
        return [interceptor_id for interceptor_id, _ in self._entries]

    def __iter__(self) -> Iterator[Tuple[int, T]]:
        # Snapshot so hooks may add or remove interceptors while the chain runs.
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, interceptor_id: object) -> bool:
        return any(existing_id == interceptor_id for existing_id, _ in self._entries)


async def _call(hook: Callable[[Any], Any], value: Any) -> Any:
    result = hook(value)
    if inspect.isawaitable(result):
        result = await result
    return result


def _wrap(exc: BaseException, kind: str, interceptor_id: int) -> BolticError:
    if isinstance(exc, BolticError):
        return exc
    return InterceptorError(
        f"{kind.capitalize()} interceptor {interceptor_id} failed: {exc}",
        kind=kind,
        interceptor_id=interceptor_id,
    )


class InterceptorManager:
    """
    Request and response interceptor chains of one HTTP client.

    :ivar request: Chain of ``request -> request`` hooks.
    :ivar response: Chain of :class:`ResponseHandlers`.
    """

    def __init__(self) -> None:
        self.request: InterceptorChain[RequestInterceptor] = InterceptorChain("request")
        self.response: InterceptorChain[ResponseHandlers] = InterceptorChain("response")

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> int:
        if not callable(interceptor):
            raise TypeError("interceptor must be callable.")
        return self.request.use(interceptor)

    def add_response_interceptor(
        self,
        on_success: Optional[ResponseInterceptor] = None,
        on_error: Optional[ErrorInterceptor] = None,
    ) -> int:
        if on_success is None and on_error is None:
            raise TypeError("At least one of on_success or on_error is required.")
        for hook in (on_success, on_error):
            if hook is not None and not callable(hook):
                raise TypeError("Response interceptors must be callable.")
        return self.response.use(ResponseHandlers(on_success, on_error))

    def remove_interceptor(self, kind: str, interceptor_id: int) -> None:
        """
        Remove an interceptor by id from the ``"request"`` or ``"response"`` chain.

        Removing an id that is not registered is a no-op.

        :raises ValueError: If ``kind`` names no chain.
        """
        if kind == "request":
            self.request.eject(interceptor_id)
        elif kind == "response":
            self.response.eject(interceptor_id)
        else:
            raise ValueError(f"Unknown interceptor kind {kind!r}; expected 'request' or 'response'.")

    async def run_request(
        self,
        request: Any,
        *,
        is_request: Callable[[Any], bool] = lambda value: value is not None,
    ) -> Any:
        """
        Run every request interceptor in order, feeding each the previous output.

        :raises ~boltic_sdk.core.errors.BolticError: The first failure, wrapped in
            :class:`~boltic_sdk.core.errors.InterceptorError` unless it already is
            an SDK error. Remaining interceptors are skipped. A hook whose result
            fails ``is_request`` also raises
            :class:`~boltic_sdk.core.errors.InterceptorError`.
        """
        for interceptor_id, interceptor in self.request:
            try:
                request = await _call(interceptor, request)
            except Exception as exc:
                wrapped = _wrap(exc, "request", interceptor_id)
                if wrapped is exc:
                    raise
                raise wrapped from exc
            if not is_request(request):
                raise InterceptorError(
                    f"Request interceptor {interceptor_id} returned {type(request).__name__}, expected a request",
                    kind="request",
                    interceptor_id=interceptor_id,
                )
        return request

    async def run_response(
        self,
        response: Any = None,
        error: Optional[BaseException] = None,
        *,
        is_response: Callable[[Any], bool] = lambda value: value is not None,
    ) -> Any:
        """
        Drive the response chain from either a response or an error.

        Entries run in registration order. While in success mode each
        ``on_success`` hook maps the response; a hook that raises switches the
        rest of the chain into error mode. While in error mode each ``on_error``
        hook receives the current error and may

        - return a response (``is_response`` is true) to recover, switching the
          rest of the chain back to success mode,
        - return another exception instance to replace the error,
        - return ``None`` to leave the error unchanged,
        - raise, which replaces the error with the raised exception, wrapped in
          :class:`~boltic_sdk.core.errors.InterceptorError` unless it already is
          an SDK error.

        :return: The final response.
        :raises BaseException: The final error when no hook recovered.
        """
        for interceptor_id, handlers in self.response:
            if error is None:
                if handlers.on_success is None:
                    continue
                try:
                    response = await _call(handlers.on_success, response)
                except Exception as exc:
                    error = _wrap(exc, "response", interceptor_id)
                    if error is not exc:
                        error.__cause__ = exc
                    response = None
                continue

            if handlers.on_error is None:
                continue
            try:
                outcome = await _call(handlers.on_error, error)
            except Exception as exc:
                error = _wrap(exc, "response", interceptor_id)
                if error is not exc:
                    error.__cause__ = exc
                continue
            if isinstance(outcome, BaseException):
                error = outcome
            elif outcome is not None and is_response(outcome):
                response, error = outcome, None

        if error is not None:
            raise error
        return response


__all__ = [
    "InterceptorChain",
    "InterceptorManager",
    "ResponseHandlers",
    "RequestInterceptor",
    "ResponseInterceptor",
    "ErrorInterceptor",
]
