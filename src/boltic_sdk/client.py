# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from typing import Any, Optional, Union

from .core.auth import AuthConfig, AuthManager
from .core.config import ClientConfig, Environment
from .core.http import HttpClient
from .core.interceptors import ErrorInterceptor, RequestInterceptor, ResponseInterceptor
from .core.results import DatabaseContext
from .core.transport import HttpTransport
from .operations.columns import ColumnOperations
from .operations.tables import TableOperations


class BolticClient:
    """
    High-level client for the Boltic Tables API.

    The client validates the API key, holds an immutable
    :class:`~boltic_sdk.core.config.ClientConfig` snapshot and owns one
    :class:`~boltic_sdk.core.http.HttpClient` whose every request carries the
    ``x-boltic-token`` header. Resource operations are grouped under namespaces:

    - ``client.tables``: create, list, find, update, rename, share and delete tables
    - ``client.columns``: create, list, find, update and delete columns

    **Async Context Manager (Recommended)**::

        async with create_client(api_key, environment="sit") as client:
            result = await client.tables.find_all()
        # HTTP resources released

    :param api_key: Boltic API key (at least 10 characters).
    :type api_key: :class:`str`
    :param environment: Target deployment (``"dev"``, ``"sit"``, ``"staging"``,
        ``"prod"`` or ``"local"``). Default is ``"prod"``.
    :type environment: :class:`str` or ~boltic_sdk.core.config.Environment
    :param transport: Transport used for all requests. Defaults to
        :class:`~boltic_sdk.core.transport.RequestsTransport`.
    :type transport: ~boltic_sdk.core.transport.HttpTransport or None
    :param options: Remaining configuration knobs: ``base_url``, ``timeout`` (ms),
        ``retry_attempts``, ``retry_delay`` (ms), ``headers`` and ``debug``.

    :raises ~boltic_sdk.core.errors.AuthenticationError: If the API key is
        missing or malformed.
    :raises TypeError: If an unknown option is passed.
    :raises ValueError: If the environment is unknown or a value is out of range.

    Example:
        Register interceptors and call the API::

            client = create_client("my-api-key-123", environment="sit", debug=True)

            def tag(request):
                request.headers["x-request-source"] = "etl"
                return request

            interceptor_id = client.add_request_interceptor(tag)
            tables = await client.tables.find_all({"limit": 5})
            client.remove_interceptor("request", interceptor_id)
    """

    def __init__(
        self,
        api_key: str,
        *,
        environment: Union[str, Environment] = Environment.PROD,
        transport: Optional[HttpTransport] = None,
        **options: Any,
    ) -> None:
        self._config = ClientConfig.for_environment(environment, **options)
        self._auth = AuthManager(AuthConfig(api_key=api_key, max_retries=self._config.retry_attempts))
        self._http = HttpClient(self._config, self._auth, transport=transport)
        self._current_database: Optional[DatabaseContext] = None

        self.tables = TableOperations(self)
        self.columns = ColumnOperations(self)

    async def __aenter__(self) -> "BolticClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the HTTP transport. Safe to call multiple times."""
        self._http.close()

    # ------------------------------------------------------- database context

    def use_database(self, database_id: str, database_name: Optional[str] = None) -> None:
        """Select the database that subsequent table and column calls target."""
        self._current_database = DatabaseContext(
            database_id=database_id,
            database_name=database_name or database_id,
        )

    def get_current_database(self) -> Optional[DatabaseContext]:
        return self._current_database

    def get_database_context(self) -> Optional[DatabaseContext]:
        return self._current_database

    # ---------------------------------------------------------- configuration

    def get_config(self) -> ClientConfig:
        return self._config

    def update_config(self, **changes: Any) -> ClientConfig:
        """
        Merge ``changes`` into a new configuration snapshot and apply it.

        Snapshots previously returned by :meth:`get_config` are not modified.

        :return: The new snapshot.
        :rtype: ~boltic_sdk.core.config.ClientConfig
        """
        self._config = self._config.merge(**changes)
        self._http.update_config(self._config)
        return self._config

    def update_api_key(self, new_api_key: str) -> None:
        self._auth.update_api_key(new_api_key)

    def is_authenticated(self) -> bool:
        return self._auth.is_authenticated()

    async def validate_api_key(self) -> bool:
        return await self._auth.validate_api_key_async()

    # ------------------------------------------------------------------- http

    def get_http_client(self) -> HttpClient:
        return self._http

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> int:
        return self._http.add_request_interceptor(interceptor)

    def add_response_interceptor(
        self,
        on_success: Optional[ResponseInterceptor] = None,
        on_error: Optional[ErrorInterceptor] = None,
    ) -> int:
        return self._http.add_response_interceptor(on_success, on_error)

    def remove_interceptor(self, kind: str, interceptor_id: int) -> None:
        self._http.remove_interceptor(kind, interceptor_id)

    def __repr__(self) -> str:
        return f"BolticClient(environment={self._config.environment.value!r}, base_url={self._config.base_url!r})"


def create_client(api_key: str, **options: Any) -> BolticClient:
    """
    Create a :class:`BolticClient`.

    :param api_key: Boltic API key.
    :type api_key: str
    :param options: Forwarded to :class:`BolticClient`.
    :rtype: BolticClient
    """
    return BolticClient(api_key, **options)


__all__ = ["BolticClient", "create_client"]
