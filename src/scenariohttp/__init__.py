# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
scenariohttp package entrypoint.

Pluggable HTTP transports for a test-automation engine. Every backend satisfies
one HttpClient contract: the httpx backend talks to real endpoints, the
in-process backend drives a locally hosted service without a socket. Both
record timing, wire headers and cookies the same way.
"""

from .bridge import AsyncBridge, CallShape
from .config import Config, load_config
from .errors import ConfigurationError, ErrorCategory, HttpExecutionError, ScenarioHttpError
from .http import (
    Cookie,
    HttpClient,
    HttpLogger,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    InProcessHttpClient,
    WsgiService,
    create_default_http_client,
    create_http_client,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "AsyncBridge",
    "CallShape",
    "Config",
    "ConfigurationError",
    "Cookie",
    "ErrorCategory",
    "HttpClient",
    "HttpExecutionError",
    "HttpLogger",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "InProcessHttpClient",
    "ScenarioHttpError",
    "WsgiService",
    "create_default_http_client",
    "create_http_client",
    "load_config",
    "setup_logging",
    "__version__",
]
