# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Boltic SDK.

This module contains the foundational components including authentication,
configuration, the HTTP client with its interceptor chains, and error handling.
"""

from .auth import AuthConfig, AuthManager, TokenInfo
from .config import ClientConfig, Environment
from .errors import (
    AuthenticationError,
    BolticError,
    HttpError,
    InterceptorError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)
from .http import HttpClient
from .interceptors import InterceptorChain, InterceptorManager
from .results import ApiResponse, DatabaseContext, PaginationInfo
from .transport import HttpRequestConfig, HttpResponse, HttpTransport, RequestsTransport

__all__ = [
    "AuthConfig",
    "AuthManager",
    "TokenInfo",
    "ClientConfig",
    "Environment",
    "BolticError",
    "AuthenticationError",
    "HttpError",
    "InterceptorError",
    "NetworkError",
    "RequestTimeoutError",
    "ValidationError",
    "HttpClient",
    "InterceptorChain",
    "InterceptorManager",
    "ApiResponse",
    "DatabaseContext",
    "PaginationInfo",
    "HttpRequestConfig",
    "HttpResponse",
    "HttpTransport",
    "RequestsTransport",
]
