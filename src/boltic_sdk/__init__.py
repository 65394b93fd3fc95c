# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Boltic SDK for Python.

A client for the Boltic Tables REST API: API key authentication, request and
response interceptors, and table/column operations.

Example::

    from boltic_sdk import create_client

    async with create_client("my-api-key-123", environment="sit") as client:
        result = await client.tables.find_all()
"""

from .__version__ import __version__
from .client import BolticClient, create_client
from .core.config import ClientConfig, Environment
from .core.errors import (
    AuthenticationError,
    BolticError,
    HttpError,
    InterceptorError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)
from .core.results import ApiResponse, DatabaseContext, PaginationInfo
from .core.transport import HttpRequestConfig, HttpResponse

__all__ = [
    "__version__",
    "BolticClient",
    "create_client",
    "ClientConfig",
    "Environment",
    "BolticError",
    "AuthenticationError",
    "HttpError",
    "InterceptorError",
    "NetworkError",
    "RequestTimeoutError",
    "ValidationError",
    "ApiResponse",
    "DatabaseContext",
    "PaginationInfo",
    "HttpRequestConfig",
    "HttpResponse",
]
