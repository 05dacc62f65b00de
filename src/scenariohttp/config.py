# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport configuration snapshot."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from .errors import ConfigurationError

DEFAULT_SSL_ALGORITHM = "TLS"
DEFAULT_TIMEOUT_MILLIS = 30000


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _list_env(name: str) -> tuple[str, ...] | None:
    value = os.getenv(name)
    if value is None:
        return None
    hosts = tuple(item.strip() for item in value.split(",") if item.strip())
    return hosts or None


@dataclass(frozen=True)
class Config:
    """
    Immutable transport settings consumed by HttpClient backends.

    A backend never patches a Config in place: the engine hands over a new
    snapshot through `HttpClient.configure` and the backend rebuilds its
    transport from it.
    """

    ssl_enabled: bool = False
    ssl_algorithm: str | None = DEFAULT_SSL_ALGORITHM
    ssl_trust_all: bool = True
    ssl_trust_store: str | None = None
    ssl_trust_store_password: str | None = None
    ssl_trust_store_type: str | None = None
    ssl_key_store: str | None = None
    ssl_key_store_password: str | None = None
    ssl_key_store_type: str | None = None
    follow_redirects: bool = True
    connect_timeout_millis: int = DEFAULT_TIMEOUT_MILLIS
    read_timeout_millis: int = DEFAULT_TIMEOUT_MILLIS
    local_address: str | None = None
    proxy_uri: str | None = None
    proxy_username: str | None = None
    proxy_password: str | None = None
    non_proxy_hosts: tuple[str, ...] | None = None

    @classmethod
    def from_env(cls) -> Config:
        """Create a snapshot from environment variables (evaluated at call time)."""
        return cls(
            ssl_enabled=_bool_env("SCENARIOHTTP_SSL_ENABLED", cls.ssl_enabled),
            ssl_algorithm=os.getenv("SCENARIOHTTP_SSL_ALGORITHM", DEFAULT_SSL_ALGORITHM),
            ssl_trust_all=_bool_env("SCENARIOHTTP_SSL_TRUST_ALL", cls.ssl_trust_all),
            follow_redirects=_bool_env("SCENARIOHTTP_FOLLOW_REDIRECTS", cls.follow_redirects),
            connect_timeout_millis=_int_env("SCENARIOHTTP_CONNECT_TIMEOUT", cls.connect_timeout_millis),
            read_timeout_millis=_int_env("SCENARIOHTTP_READ_TIMEOUT", cls.read_timeout_millis),
            local_address=os.getenv("SCENARIOHTTP_LOCAL_ADDRESS") or None,
            proxy_uri=os.getenv("SCENARIOHTTP_PROXY_URI") or None,
            proxy_username=os.getenv("SCENARIOHTTP_PROXY_USERNAME") or None,
            proxy_password=os.getenv("SCENARIOHTTP_PROXY_PASSWORD") or None,
            non_proxy_hosts=_list_env("SCENARIOHTTP_NON_PROXY_HOSTS"),
        )

    def with_option(self, key: str, value: Any) -> Config:
        """
        Return a new snapshot with one engine option applied.

        `key` uses the engine's option names (`ssl`, `proxy`, `connectTimeout`, ...).
        The same key is what a backend receives as `changed_key` in `configure`.
        """
        if key == "ssl":
            return self._with_ssl(value)
        if key == "proxy":
            return self._with_proxy(value)
        if key == "followRedirects":
            return replace(self, follow_redirects=bool(value))
        if key == "connectTimeout":
            return replace(self, connect_timeout_millis=_as_millis(key, value))
        if key == "readTimeout":
            return replace(self, read_timeout_millis=_as_millis(key, value))
        if key == "localAddress":
            return replace(self, local_address=None if value is None else str(value))
        raise ConfigurationError(f"unexpected configure key: {key}")

    def _with_ssl(self, value: Any) -> Config:
        if value is None or isinstance(value, bool):
            return replace(self, ssl_enabled=bool(value))
        if isinstance(value, str):
            return replace(self, ssl_enabled=True, ssl_algorithm=value)
        if not isinstance(value, Mapping):
            raise ConfigurationError(f"ssl must be a boolean, string or mapping, got {type(value).__name__}")
        return replace(
            self,
            ssl_enabled=True,
            ssl_algorithm=value.get("algorithm") or DEFAULT_SSL_ALGORITHM,
            ssl_trust_all=bool(value.get("trustAll", True)),
            ssl_trust_store=value.get("trustStore"),
            ssl_trust_store_password=value.get("trustStorePassword"),
            ssl_trust_store_type=value.get("trustStoreType"),
            ssl_key_store=value.get("keyStore"),
            ssl_key_store_password=value.get("keyStorePassword"),
            ssl_key_store_type=value.get("keyStoreType"),
        )

    def _with_proxy(self, value: Any) -> Config:
        if value is None:
            return replace(self, proxy_uri=None, proxy_username=None, proxy_password=None, non_proxy_hosts=None)
        if isinstance(value, str):
            return replace(self, proxy_uri=value, proxy_username=None, proxy_password=None, non_proxy_hosts=None)
        if not isinstance(value, Mapping):
            raise ConfigurationError(f"proxy must be a string or mapping, got {type(value).__name__}")
        hosts = value.get("nonProxyHosts")
        if isinstance(hosts, str):
            hosts = [hosts]
        return replace(
            self,
            proxy_uri=value.get("uri"),
            proxy_username=value.get("username"),
            proxy_password=value.get("password"),
            non_proxy_hosts=tuple(str(h) for h in hosts) if hosts is not None else None,
        )


def _as_millis(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be a number of milliseconds, got {value!r}") from exc


def load_config() -> Config:
    """Load a Config from environment with sensible defaults."""
    return Config.from_env()


__all__ = ["DEFAULT_SSL_ALGORITHM", "DEFAULT_TIMEOUT_MILLIS", "Config", "load_config"]
