# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client, create_http_client
from .headers import Headers, header_value, header_values, normalize_headers
from .host import HostRequest, HostResponse, HostService, WsgiService
from .httpx_client import HttpxClient
from .inprocess import InProcessHttpClient
from .logger import HttpLogger
from .models import Cookie, HttpRequest, HttpResponse
from .tls import build_ssl_context
from .utils import (
    create_cookie_header_value,
    create_set_cookie_header_value,
    parse_content_type_charset,
    parse_content_type_params,
    parse_cookie_header_string,
    parse_cookie_request_header,
    parse_uri_pattern,
)

__all__ = [
    "Cookie",
    "Headers",
    "HostRequest",
    "HostResponse",
    "HostService",
    "HttpClient",
    "HttpLogger",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "InProcessHttpClient",
    "StubHttpClient",
    "WsgiService",
    "build_ssl_context",
    "create_cookie_header_value",
    "create_default_http_client",
    "create_http_client",
    "create_set_cookie_header_value",
    "header_value",
    "header_values",
    "normalize_headers",
    "parse_content_type_charset",
    "parse_content_type_params",
    "parse_cookie_header_string",
    "parse_cookie_request_header",
    "parse_uri_pattern",
]
