# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import ipaddress
import logging
import socket
import ssl
import urllib.request
from dataclasses import dataclass, field
from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx

from ..config import Config, load_config
from ..errors import ConfigurationError, HttpExecutionError
from .client import HttpClient
from .headers import headers_from_raw, iter_header_pairs
from .logger import HttpLogger
from .models import HttpRequest, HttpResponse
from .tls import build_ssl_context

REQUEST_EXTENSION = "scenariohttp.request"


class LenientCookiePolicy(DefaultCookiePolicy):
    """Accept cookies whatever their Domain/Path attributes claim."""

    def set_ok_domain(self, cookie, request) -> bool:  # noqa: ANN001, ARG002
        return True

    def set_ok_path(self, cookie, request) -> bool:  # noqa: ANN001, ARG002
        return True


@dataclass(frozen=True)
class TransportOptions:
    """Everything the httpx client is built from, derived from one Config."""

    verify: ssl.SSLContext | bool
    timeout: httpx.Timeout
    follow_redirects: bool
    local_address: str | None = None
    proxy: httpx.Proxy | None = None
    non_proxy_hosts: tuple[str, ...] = ()
    environment_proxies: dict[str, str | None] = field(default_factory=dict)


def resolve_local_address(address: str | None, logger: logging.Logger) -> str | None:
    """Resolve a hostname or IP to bind outgoing sockets to; failures only warn."""
    if not address:
        return None
    try:
        infos = socket.getaddrinfo(address, None, type=socket.SOCK_STREAM)
    except (OSError, UnicodeError) as exc:
        logger.warning("failed to resolve local address: %s - %s", address, exc)
        return None
    if not infos:
        logger.warning("failed to resolve local address: %s - no addresses", address)
        return None
    return str(infos[0][4][0])


def _host_pattern(host: str) -> str:
    """Mount pattern for exactly `host`; IPv6 literals are bracketed."""
    host = host.strip().lower()
    if ":" in host and not host.startswith("["):
        try:
            host = f"[{ipaddress.IPv6Address(host).compressed}]"
        except ValueError:
            pass
    return f"all://{host}"


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


def environment_proxies() -> dict[str, str | None]:
    """
    Proxy routes from the `*_proxy` environment variables, keyed by mount pattern.

    Follows httpx's own reading of the environment: `http`, `https` and `all`
    proxies, plus `no_proxy` entries mapped to None (a direct route). A `*` in
    `no_proxy` disables every environment proxy.
    """
    proxies = urllib.request.getproxies()
    routes: dict[str, str | None] = {}
    for scheme in ("http", "https", "all"):
        url = proxies.get(scheme)
        if url:
            routes[f"{scheme}://"] = url if "://" in url else f"http://{url}"
    for host in (item.strip() for item in proxies.get("no", "").split(",")):
        if not host:
            continue
        if host == "*":
            return {}
        if "://" in host:
            routes[host] = None
        elif host == "localhost" or _is_ip_literal(host):
            routes[_host_pattern(host)] = None
        else:
            routes[f"all://*{host}"] = None
    return routes


def build_proxy(config: Config) -> httpx.Proxy | None:
    """Build the proxy for `config`; a malformed proxy URI is a ConfigurationError."""
    if not config.proxy_uri:
        return None
    try:
        url = httpx.URL(config.proxy_uri)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"invalid proxy uri: {config.proxy_uri} - {exc}") from exc
    if not url.scheme or not url.host:
        raise ConfigurationError(f"invalid proxy uri: {config.proxy_uri}")
    auth = None
    if config.proxy_username is not None and config.proxy_password is not None:
        auth = (config.proxy_username, config.proxy_password)
    try:
        return httpx.Proxy(url, auth=auth)
    except ValueError as exc:
        raise ConfigurationError(f"invalid proxy uri: {config.proxy_uri} - {exc}") from exc


def build_transport_options(config: Config, logger: logging.Logger) -> TransportOptions:
    verify: ssl.SSLContext | bool = build_ssl_context(config) if config.ssl_enabled else True
    proxy = build_proxy(config)
    non_proxy_hosts: tuple[str, ...] = ()
    if proxy is not None and config.non_proxy_hosts:
        non_proxy_hosts = tuple(host.strip().lower() for host in config.non_proxy_hosts if host and host.strip())
    return TransportOptions(
        verify=verify,
        timeout=httpx.Timeout(
            config.read_timeout_millis / 1000,
            connect=config.connect_timeout_millis / 1000,
        ),
        follow_redirects=config.follow_redirects,
        local_address=resolve_local_address(config.local_address, logger),
        proxy=proxy,
        non_proxy_hosts=non_proxy_hosts,
        environment_proxies=environment_proxies() if proxy is None else {},
    )


class HttpxClient(HttpClient):
    """
    Network backend driving an httpx.Client built from the current Config.

    When redirects are enabled httpx follows them for every method, POST
    included.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        http_logger: HttpLogger | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._http_logger = http_logger or HttpLogger()
        self._transport = transport
        self._config = config or load_config()
        self._client = self._build_client(self._config)

    def get_logger(self) -> logging.Logger:
        return self._http_logger.logger

    def get_config(self) -> Config:
        return self._config

    def configure(self, config: Config, changed_key: str | None = None) -> None:  # noqa: ARG002
        # everything is rebuilt; the old client stays active if the build fails
        client = self._build_client(config)
        previous = self._client
        self._client = client
        self._config = config
        if self._transport is None:
            previous.close()

    def _build_client(self, config: Config) -> httpx.Client:
        options = build_transport_options(config, self.get_logger())
        transport_kwargs = {"verify": options.verify, "local_address": options.local_address}
        try:
            default_transport = self._transport or httpx.HTTPTransport(**transport_kwargs)
            mounts: dict[str, httpx.BaseTransport | None] = {}
            if options.proxy is not None:
                mounts["all://"] = self._transport or httpx.HTTPTransport(proxy=options.proxy, **transport_kwargs)
                for host in options.non_proxy_hosts:
                    # None routes the host through the default, unproxied transport
                    mounts[_host_pattern(host)] = None
            elif self._transport is None:
                # httpx skips environment proxies once a transport is passed in
                for pattern, url in options.environment_proxies.items():
                    mounts[pattern] = (
                        None if url is None else httpx.HTTPTransport(proxy=httpx.Proxy(url), **transport_kwargs)
                    )
            return httpx.Client(
                transport=default_transport,
                mounts=mounts or None,
                verify=options.verify,
                timeout=options.timeout,
                follow_redirects=options.follow_redirects,
                cookies=CookieJar(policy=LenientCookiePolicy()),
                trust_env=options.proxy is None,
                event_hooks={"request": [self._on_request]},
            )
        except (httpx.InvalidURL, ValueError) as exc:
            self.get_logger().error("http client init failed: %s", exc)
            raise ConfigurationError(f"http client init failed: {exc}") from exc

    def _on_request(self, wire_request: httpx.Request) -> None:
        request = wire_request.extensions.get(REQUEST_EXTENSION)
        if not isinstance(request, HttpRequest):
            return
        request.headers = headers_from_raw(wire_request.headers.raw, wire_request.headers.encoding)
        self._http_logger.log_request(self._config, request)
        request.mark_start()

    def invoke(self, request: HttpRequest) -> HttpResponse:
        # the engine owns cookie state; the jar only spans one redirect chain
        self._client.cookies.clear()
        try:
            wire_request = self._client.build_request(
                request.method,
                request.url,
                headers=list(iter_header_pairs(request.headers)),
                content=request.body,
                extensions={REQUEST_EXTENSION: request},
            )
            wire_response = self._client.send(wire_request)
            body = wire_response.content or b""
        except Exception as exc:  # noqa: BLE001
            self.get_logger().debug("request failed: %s %s - %s", request.method, request.url, exc)
            self._http_logger.discard(request)
            raise HttpExecutionError.from_exception(exc) from exc
        request.mark_end()
        response = HttpResponse(
            status_code=wire_response.status_code,
            headers=headers_from_raw(wire_response.headers.raw, wire_response.headers.encoding),
            body=bytes(body),
        )
        self._http_logger.log_response(self._config, request, response)
        return response

    def close(self) -> None:
        self._client.close()


__all__ = [
    "REQUEST_EXTENSION",
    "HttpxClient",
    "LenientCookiePolicy",
    "TransportOptions",
    "build_proxy",
    "build_transport_options",
    "environment_proxies",
    "resolve_local_address",
]
