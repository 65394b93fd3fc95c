# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured exceptions raised by the Boltic SDK.

Every error derives from :class:`BolticError` and carries a machine readable
``code`` plus a ``context`` dictionary describing the failed call (HTTP method,
URL, status code, response body, ...). Interceptors and callers inspect
``context`` rather than parsing messages.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, List, Optional

from . import _error_codes as ec


class BolticError(Exception):
    """
    Base structured error for the Boltic SDK.

    :param message: Human readable error message.
    :type message: :class:`str`
    :param code: Machine readable error code (e.g. ``"INVALID_API_KEY"``).
    :type code: :class:`str`
    :param subcode: Optional finer grained code (e.g. ``"http_404"``).
    :type subcode: :class:`str` | None
    :param status_code: HTTP status code when the error came from a response.
    :type status_code: :class:`int` | None
    :param context: Additional details about the failed call.
    :type context: :class:`dict` | None
    :param source: ``"client"`` or ``"server"``.
    :type source: :class:`str` | None
    :param is_transient: Whether retrying the call may succeed.
    :type is_transient: :class:`bool`
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.context: Dict[str, Any] = dict(context or {})
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat()

    @property
    def cause(self) -> Optional[BaseException]:
        """The underlying exception, if this error wraps one."""
        return self.__cause__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "context": dict(self.context),
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
            "cause": repr(self.__cause__) if self.__cause__ is not None else None,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class AuthenticationError(BolticError):
    """Raised when the API key is missing or malformed."""

    def __init__(self, message: str, *, code: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code=code, context=context, source="client")


class ValidationError(BolticError):
    """Raised when resource operation arguments fail client-side validation."""

    def __init__(
        self,
        message: str,
        *,
        subcode: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["errors"] = list(errors or [])
        super().__init__(message, code=ec.VALIDATION_ERROR, subcode=subcode, context=ctx, source="client")

    @property
    def errors(self) -> List[Dict[str, str]]:
        return self.context["errors"]


class NetworkError(BolticError):
    """Raised when the transport fails before any response is received."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code=ec.NETWORK_ERROR, context=context, source="client", is_transient=True)


class RequestTimeoutError(BolticError, TimeoutError):
    """
    Raised when a transport call does not complete within the configured timeout.

    Also a built-in :class:`TimeoutError`, so ``except TimeoutError`` catches it.
    """

    def __init__(self, message: str, *, timeout: Optional[float] = None, context: Optional[Dict[str, Any]] = None) -> None:
        ctx = dict(context or {})
        if timeout is not None:
            ctx["timeout"] = timeout
        super().__init__(message, code=ec.REQUEST_TIMEOUT, context=ctx, source="client")


class InterceptorError(BolticError):
    """Raised when a user supplied interceptor fails."""

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        interceptor_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["interceptor_kind"] = kind
        if interceptor_id is not None:
            ctx["interceptor_id"] = interceptor_id
        super().__init__(message, code=ec.INTERCEPTOR_ERROR, context=ctx, source="client")


class HttpError(BolticError):
    """
    Raised for responses with a non-2xx status code.

    ``context`` carries ``response`` (the decoded body), ``url``, ``method`` and
    the classification flags ``is_client_error``, ``is_server_error``,
    ``is_auth_error``, ``is_not_found_error`` and ``is_rate_limit_error``.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        *,
        response: Any = None,
        status_text: Optional[str] = None,
        is_transient: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["status_code"] = status_code
        ctx["response"] = response
        if status_text is not None:
            ctx["status_text"] = status_text
        ctx["is_client_error"] = 400 <= status_code < 500
        ctx["is_server_error"] = status_code >= 500
        ctx["is_auth_error"] = status_code in (401, 403)
        ctx["is_not_found_error"] = status_code == 404
        ctx["is_rate_limit_error"] = status_code == 429
        super().__init__(
            message,
            code=ec.HTTP_ERROR,
            subcode=ec._http_subcode(status_code),
            status_code=status_code,
            context=ctx,
            source="server",
            is_transient=is_transient,
        )

    @property
    def response(self) -> Any:
        return self.context.get("response")


def format_error(error: BaseException) -> str:
    """Render an error as a one-line summary, used as ``ApiResponse.error``."""
    if isinstance(error, BolticError):
        formatted = f"{error.__class__.__name__}: {error.message}"
        if error.status_code:
            formatted += f" (HTTP {error.status_code})"
        return formatted
    return f"{error.__class__.__name__}: {error}"


__all__ = [
    "BolticError",
    "AuthenticationError",
    "ValidationError",
    "NetworkError",
    "RequestTimeoutError",
    "InterceptorError",
    "HttpError",
    "format_error",
]
