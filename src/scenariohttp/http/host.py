# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
In-process host contract.

A host service handles a request object and fills in a response object, the
way a servlet container hands a servlet its request and response. Cookies are
structured on both sides (`http.cookies.Morsel`), never raw header strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from http.cookies import Morsel
from typing import Any, Protocol

import httpx

from .headers import Headers, add_header, header_values, headers_from_raw, iter_header_pairs
from .models import Cookie
from .utils import create_cookie_header_value, parse_cookie_header_string


def cookie_to_morsel(cookie: Cookie) -> Morsel:
    """Convert a Cookie to the host's native cookie type; raises CookieError for illegal names."""
    morsel: Morsel = Morsel()
    morsel.set(cookie.name, cookie.value, cookie.value)
    if cookie.domain:
        morsel["domain"] = cookie.domain
    if cookie.path:
        morsel["path"] = cookie.path
    if cookie.max_age is not None:
        morsel["max-age"] = cookie.max_age
    morsel["secure"] = cookie.secure
    morsel["httponly"] = cookie.http_only
    return morsel


def morsel_to_cookie(morsel: Morsel) -> Cookie:
    max_age: Any = morsel["max-age"]
    try:
        parsed_max_age = int(max_age) if max_age not in ("", None) else None
    except (TypeError, ValueError):
        parsed_max_age = None
    return Cookie(
        name=morsel.key,
        value=morsel.coded_value,
        domain=morsel["domain"] or None,
        path=morsel["path"] or None,
        max_age=parsed_max_age,
        secure=bool(morsel["secure"]),
        http_only=bool(morsel["httponly"]),
    )


@dataclass
class HostRequest:
    method: str
    uri: str
    headers: Headers = field(default_factory=dict)
    cookies: list[Morsel] = field(default_factory=list)
    body: bytes | None = None

    def add_header(self, name: str, value: str) -> None:
        add_header(self.headers, name, value)

    def header_values(self, name: str) -> list[str] | None:
        return header_values(self.headers, name)

    def header_map(self) -> Headers:
        """Headers as a host would report them, cookies folded back into a Cookie header."""
        headers = {name: list(values) for name, values in self.headers.items()}
        if self.cookies:
            value = create_cookie_header_value(morsel_to_cookie(m) for m in self.cookies)
            add_header(headers, "Cookie", value)
        return headers


@dataclass
class HostResponse:
    status: int = 200
    headers: Headers = field(default_factory=dict)
    cookies: list[Morsel] = field(default_factory=list)
    body: bytearray = field(default_factory=bytearray)

    def add_header(self, name: str, value: str) -> None:
        add_header(self.headers, name, value)

    def add_cookie(self, morsel: Morsel) -> None:
        self.cookies.append(morsel)

    def set_cookie(self, name: str, value: str, **attributes: Any) -> None:
        """Add a cookie; `attributes` are Cookie fields (domain, path, max_age, secure, http_only)."""
        self.add_cookie(cookie_to_morsel(Cookie(name=name, value=value, **attributes)))

    def write(self, data: bytes | str) -> None:
        self.body.extend(data.encode("utf-8") if isinstance(data, str) else data)


class HostService(Protocol):
    """A locally hosted service that handles requests without a network socket."""

    def service(self, request: HostRequest, response: HostResponse) -> None: ...


class WsgiService(HostService):
    """Hosts a WSGI application (Flask, Django, ...) as an in-process service."""

    def __init__(self, app: Any, *, base_url: str = "http://localhost"):
        self._transport = httpx.WSGITransport(app=app)
        self._base_url = httpx.URL(base_url)

    def service(self, request: HostRequest, response: HostResponse) -> None:
        url = httpx.URL(request.uri)
        if not url.is_absolute_url:
            url = self._base_url.join(url)
        wsgi_request = httpx.Request(
            request.method,
            url,
            headers=list(iter_header_pairs(request.header_map())),
            content=request.body,
        )
        wsgi_response = self._transport.handle_request(wsgi_request)
        try:
            content = wsgi_response.read()
        finally:
            wsgi_response.close()
        response.status = wsgi_response.status_code
        for name, values in headers_from_raw(wsgi_response.headers.raw).items():
            for value in values:
                if name.lower() == "set-cookie":
                    for cookie in parse_cookie_header_string(value).values():
                        response.add_cookie(cookie_to_morsel(cookie))
                else:
                    response.add_header(name, value)
        response.write(content)


__all__ = [
    "HostRequest",
    "HostResponse",
    "HostService",
    "WsgiService",
    "cookie_to_morsel",
    "morsel_to_cookie",
]
