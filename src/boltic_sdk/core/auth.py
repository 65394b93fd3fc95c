# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
API key authentication for Boltic services.

:class:`AuthManager` owns the API key, validates its shape and produces the
headers attached to every outbound request.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from azure.core.credentials import AzureKeyCredential

from . import _error_codes as ec
from ..common.constants import API_KEY_MIN_LENGTH, HEADER_BOLTIC_SERVICE, HEADER_BOLTIC_TOKEN
from .errors import AuthenticationError


@dataclass(frozen=True)
class AuthConfig:
    """
    Authentication settings.

    :param api_key: Boltic API key.
    :type api_key: str
    :param token_refresh_threshold: Seconds before expiry at which a cached token
        should be refreshed.
    :type token_refresh_threshold: int or None
    :param max_retries: Retry budget reported to the HTTP layer (default: 3).
    :type max_retries: int
    """

    api_key: str
    token_refresh_threshold: Optional[int] = None
    max_retries: int = 3

    def __repr__(self) -> str:
        return (
            f"AuthConfig(api_key='***', token_refresh_threshold={self.token_refresh_threshold!r}, "
            f"max_retries={self.max_retries!r})"
        )


@dataclass(frozen=True)
class TokenInfo:
    """Resolved authentication token. Immutable, so it can be handed out freely."""

    token: str
    is_valid: bool
    expires_at: Optional[datetime] = None


def _validate_api_key(api_key: Any) -> None:
    if not isinstance(api_key, str) or not api_key.strip():
        raise AuthenticationError(
            "API key is required and must be a non-empty string",
            code=ec.INVALID_API_KEY,
        )
    if len(api_key) < API_KEY_MIN_LENGTH:
        raise AuthenticationError(
            "API key appears to be invalid (too short)",
            code=ec.INVALID_API_KEY_FORMAT,
            context={"min_length": API_KEY_MIN_LENGTH},
        )


class AuthManager:
    """
    API key based authentication helper for Boltic.

    The key is held in a private :class:`~azure.core.credentials.AzureKeyCredential`
    and can only be rotated through :meth:`update_api_key`, which validates the
    new key and drops the cached token.

    :param config: Authentication settings.
    :type config: ~boltic_sdk.core.auth.AuthConfig

    :raises ~boltic_sdk.core.errors.AuthenticationError: If the key is empty
        (``INVALID_API_KEY``) or shorter than 10 characters (``INVALID_API_KEY_FORMAT``).
    """

    def __init__(self, config: AuthConfig) -> None:
        _validate_api_key(config.api_key)
        self._config = config
        self._credential = AzureKeyCredential(config.api_key)
        self._token_info: Optional[TokenInfo] = None

    @property
    def max_retries(self) -> int:
        return self._config.max_retries if self._config.max_retries is not None else 3

    def get_auth_headers(self) -> Dict[str, str]:
        """Return a fresh ``{"x-boltic-token": <api key>}`` mapping."""
        return {HEADER_BOLTIC_TOKEN: self._credential.key}

    def get_service_headers(self, service: Optional[str] = None) -> Dict[str, str]:
        """Return the auth headers, plus ``x-boltic-service`` when ``service`` is given."""
        headers = self.get_auth_headers()
        if service:
            headers[HEADER_BOLTIC_SERVICE] = service
        return headers

    def update_api_key(self, new_api_key: str) -> None:
        """
        Replace the API key and discard any cached token.

        :raises ~boltic_sdk.core.errors.AuthenticationError: If the new key is invalid;
            the previous key stays in effect.
        """
        _validate_api_key(new_api_key)
        self._credential.update(new_api_key)
        self._config = replace(self._config, api_key=new_api_key)
        self._token_info = None

    def is_authenticated(self) -> bool:
        return bool(self._credential.key)

    async def validate_api_key_async(self) -> bool:
        """
        Check the stored key and report the outcome instead of raising.

        Only the local format check is performed; no validation endpoint is called.
        """
        try:
            _validate_api_key(self._credential.key)
        except AuthenticationError:
            return False
        return True

    async def validate_for_service(self) -> bool:
        """Validate the key before calling a Boltic service; returns ``False`` on any failure."""
        try:
            return await self.validate_api_key_async()
        except Exception:
            return False

    def get_token_info(self) -> Optional[TokenInfo]:
        return self._token_info


__all__ = ["AuthConfig", "AuthManager", "TokenInfo"]
