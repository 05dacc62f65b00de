# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction and factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from ..config import Config
from .logger import HttpLogger
from .models import HttpRequest, HttpResponse

if TYPE_CHECKING:
    from .host import HostService


class HttpClient(Protocol):
    """
    Contract every backend satisfies.

    The engine only talks to this protocol, so a network backend and an
    in-process backend are interchangeable apart from timing and TLS realism.
    """

    def invoke(self, request: HttpRequest) -> HttpResponse: ...

    def configure(self, config: Config, changed_key: str | None = None) -> None: ...

    def get_config(self) -> Config: ...

    def get_logger(self) -> logging.Logger: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_http_client(
    config: Config | None = None,
    *,
    service: HostService | None = None,
    http_logger: HttpLogger | None = None,
) -> HttpClient:
    """
    Pick a backend for a target.

    A host service means the target lives in this process and is driven through
    the in-process adapter; otherwise requests go over the network via httpx.
    """
    if service is not None:
        from .inprocess import InProcessHttpClient

        return InProcessHttpClient(service, config, http_logger=http_logger)
    from .httpx_client import HttpxClient

    return HttpxClient(config, http_logger=http_logger)


def create_default_http_client(config: Config | None = None) -> HttpClient:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HttpxClient

    return HttpxClient(config)


__all__ = ["HttpClient", "create_default_http_client", "create_http_client"]
