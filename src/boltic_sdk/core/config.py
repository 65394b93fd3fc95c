# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import types
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

DEFAULT_TIMEOUT_MS = 30000
"""Fallback request timeout in milliseconds when neither the caller nor the environment sets one."""

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_MS = 1000


class Environment(str, Enum):
    """Boltic deployment an SDK client talks to."""

    DEV = "dev"
    SIT = "sit"
    STAGING = "staging"
    PROD = "prod"
    LOCAL = "local"

    @classmethod
    def parse(cls, value: Union[str, "Environment"]) -> "Environment":
        """
        Coerce a string (case-insensitive) or member into an :class:`Environment`.

        :raises ValueError: If the value names no known environment.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        allowed = ", ".join(e.value for e in cls)
        raise ValueError(f"Unknown environment {value!r}; expected one of: {allowed}.")


@dataclass(frozen=True)
class EnvironmentDefaults:
    base_url: str
    timeout: int
    debug: bool = False


ENVIRONMENT_DEFAULTS: Dict[Environment, EnvironmentDefaults] = {
    Environment.LOCAL: EnvironmentDefaults("http://localhost:8000", 30000, debug=True),
    Environment.DEV: EnvironmentDefaults(
        "https://asia-south1.api.fcz0.de/service/panel/boltic-tables", 15000, debug=True
    ),
    Environment.SIT: EnvironmentDefaults("https://asia-south1.api.fcz0.de/service/panel/boltic-tables", 15000),
    Environment.STAGING: EnvironmentDefaults("https://asia-south1.api.uat.fcz0.de/service/panel/boltic-tables", 15000),
    Environment.PROD: EnvironmentDefaults("https://asia-south1.api.boltic.io/service/panel/boltic-tables", 10000),
}


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable configuration snapshot for a Boltic client.

    Updates never mutate an existing snapshot; use :meth:`merge` (or the
    client's ``update_config``) to obtain a new one.

    :param environment: Target deployment. Default is :attr:`Environment.PROD`.
    :type environment: ~boltic_sdk.core.config.Environment
    :param base_url: API root URL. Resolved from ``environment`` when omitted.
    :type base_url: str
    :param timeout: Request timeout in milliseconds (default: environment dependent).
    :type timeout: int
    :param retry_attempts: Maximum retries for transient failures (default: 3).
    :type retry_attempts: int
    :param retry_delay: Base delay in milliseconds for exponential backoff (default: 1000).
    :type retry_delay: int
    :param headers: Extra headers sent with every request.
    :type headers: Mapping[str, str]
    :param debug: Log every request and response at DEBUG level.
    :type debug: bool
    """

    environment: Environment = Environment.PROD
    base_url: str = ENVIRONMENT_DEFAULTS[Environment.PROD].base_url
    timeout: int = ENVIRONMENT_DEFAULTS[Environment.PROD].timeout
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_delay: int = DEFAULT_RETRY_DELAY_MS
    headers: Mapping[str, str] = field(default_factory=dict)
    debug: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "environment", Environment.parse(self.environment))
        object.__setattr__(self, "base_url", (self.base_url or "").rstrip("/"))
        object.__setattr__(self, "headers", types.MappingProxyType(dict(self.headers or {})))
        if not self.base_url:
            raise ValueError("base_url is required.")
        if self.timeout is None or self.timeout <= 0:
            raise ValueError("timeout must be a positive number of milliseconds.")
        if self.retry_attempts < 0:
            raise ValueError("retry_attempts must be >= 0.")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0.")

    @classmethod
    def for_environment(cls, environment: Union[str, Environment] = Environment.PROD, **overrides: Any) -> "ClientConfig":
        """
        Build a configuration from the defaults of ``environment`` merged with ``overrides``.

        Overrides whose value is ``None`` are ignored so callers can forward optional
        arguments unchanged.

        :raises TypeError: If an override names no configuration field.
        :raises ValueError: If the environment is unknown or a value is out of range.
        """
        env = Environment.parse(environment or Environment.PROD)
        defaults = ENVIRONMENT_DEFAULTS[env]
        values: Dict[str, Any] = {
            "environment": env,
            "base_url": defaults.base_url,
            "timeout": defaults.timeout or DEFAULT_TIMEOUT_MS,
            "debug": defaults.debug,
        }
        values.update(_known_overrides(overrides))
        return cls(**values)

    def merge(self, **changes: Any) -> "ClientConfig":
        """
        Return a new snapshot with ``changes`` applied.

        Switching ``environment`` without an explicit ``base_url`` re-resolves the
        base URL for the new environment.
        """
        changes = _known_overrides(changes)
        if "environment" in changes and "base_url" not in changes:
            env = Environment.parse(changes["environment"])
            changes["base_url"] = ENVIRONMENT_DEFAULTS[env].base_url
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment.value,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "retry_attempts": self.retry_attempts,
            "retry_delay": self.retry_delay,
            "headers": dict(self.headers),
            "debug": self.debug,
        }


_CONFIG_FIELDS = frozenset(
    {"environment", "base_url", "timeout", "retry_attempts", "retry_delay", "headers", "debug"}
)


def _known_overrides(overrides: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = set(overrides) - _CONFIG_FIELDS
    if unknown:
        raise TypeError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
    return {k: v for k, v in overrides.items() if v is not None}


__all__ = [
    "ClientConfig",
    "Environment",
    "EnvironmentDefaults",
    "ENVIRONMENT_DEFAULTS",
    "DEFAULT_TIMEOUT_MS",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_DELAY_MS",
]
