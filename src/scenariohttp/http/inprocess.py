# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HttpClient that runs requests against an in-process host service."""

from __future__ import annotations

import logging
from http.cookies import CookieError

import httpx

from ..config import Config, load_config
from ..errors import ErrorCategory, HttpExecutionError
from .client import HttpClient
from .headers import add_header, iter_header_pairs, remove_header
from .host import HostRequest, HostResponse, HostService, cookie_to_morsel, morsel_to_cookie
from .logger import HttpLogger
from .models import HttpRequest, HttpResponse
from .utils import create_set_cookie_header_value, parse_cookie_request_header

SET_COOKIE = "Set-Cookie"


class InProcessHttpClient(HttpClient):
    """
    Backend that hands requests to a HostService without opening a socket.

    There is no transport to configure, so `configure` only records the snapshot
    for `get_config` and the HTTP logger.
    """

    def __init__(
        self,
        service: HostService,
        config: Config | None = None,
        *,
        http_logger: HttpLogger | None = None,
    ):
        self._service = service
        self._config = config or load_config()
        self._http_logger = http_logger or HttpLogger()

    def get_logger(self) -> logging.Logger:
        return self._http_logger.logger

    def get_config(self) -> Config:
        return self._config

    def configure(self, config: Config, changed_key: str | None = None) -> None:  # noqa: ARG002
        self._config = config

    def _to_host_request(self, request: HttpRequest) -> HostRequest:
        try:
            uri = httpx.URL(request.url)
        except httpx.InvalidURL as exc:
            raise HttpExecutionError(f"invalid url: {request.url} - {exc}", ErrorCategory.UNKNOWN_ERROR) from exc
        host_request = HostRequest(method=request.method.upper(), uri=str(uri), body=request.body)
        for name, value in iter_header_pairs(request.headers):
            if name.lower() != "cookie":
                host_request.add_header(name, value)
                continue
            for cookie in parse_cookie_request_header(value):
                try:
                    host_request.cookies.append(cookie_to_morsel(cookie))
                except CookieError as exc:
                    self.get_logger().warning("dropping cookie %r: %s", cookie.name, exc)
        return host_request

    def _to_response(self, host_response: HostResponse) -> HttpResponse:
        headers = {name: list(values) for name, values in host_response.headers.items()}
        set_cookies = [create_set_cookie_header_value(morsel_to_cookie(m)) for m in host_response.cookies]
        if set_cookies:
            # native cookies replace any Set-Cookie header the host wrote itself
            remove_header(headers, SET_COOKIE)
        for value in set_cookies:
            add_header(headers, SET_COOKIE, value)
        return HttpResponse(
            status_code=host_response.status,
            headers=headers,
            body=bytes(host_response.body),
        )

    def invoke(self, request: HttpRequest) -> HttpResponse:
        host_request = self._to_host_request(request)
        request.headers = host_request.header_map()
        self._http_logger.log_request(self._config, request)
        request.mark_start()
        host_response = HostResponse()
        try:
            self._service.service(host_request, host_response)
        except Exception as exc:  # noqa: BLE001
            self._http_logger.discard(request)
            raise HttpExecutionError.from_exception(exc, ErrorCategory.SERVICE_ERROR) from exc
        request.mark_end()
        response = self._to_response(host_response)
        self._http_logger.log_response(self._config, request, response)
        return response

    def close(self) -> None:
        return None


__all__ = ["InProcessHttpClient"]
