# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models shared by every backend."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .headers import Headers, add_header, header_value, header_values


def _now_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class Cookie:
    """A single cookie; attributes are only meaningful on the response side."""

    name: str
    value: str
    domain: str | None = None
    path: str | None = None
    max_age: int | None = None
    secure: bool = False
    http_only: bool = False


@dataclass
class HttpRequest:
    """
    Request built by the engine and executed by an HttpClient backend.

    Timestamps are epoch milliseconds and are owned by the backend: callers leave
    them unset and read them back after `invoke` returns. Backends may also
    replace `headers` with what actually went over the wire.
    """

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | None = None
    start_time_millis: int | None = None
    end_time_millis: int | None = None

    def header_values(self, name: str) -> list[str] | None:
        return header_values(self.headers, name)

    def header(self, name: str) -> str | None:
        return header_value(self.headers, name)

    def add_header(self, name: str, value: str) -> None:
        if self.headers is None:
            self.headers = {}
        add_header(self.headers, name, value)

    def mark_start(self, now_millis: int | None = None) -> None:
        self.start_time_millis = _now_millis() if now_millis is None else now_millis
        if self.end_time_millis is not None and self.end_time_millis < self.start_time_millis:
            self.end_time_millis = None

    def mark_end(self, now_millis: int | None = None) -> None:
        end = _now_millis() if now_millis is None else now_millis
        if self.start_time_millis is not None:
            end = max(end, self.start_time_millis)
        self.end_time_millis = end

    @property
    def elapsed_millis(self) -> int | None:
        if self.start_time_millis is None or self.end_time_millis is None:
            return None
        return self.end_time_millis - self.start_time_millis


@dataclass
class HttpResponse:
    """Normalized HTTP response; `body` is always bytes, empty when there was no entity."""

    status_code: int
    headers: Headers = field(default_factory=dict)
    body: bytes = b""

    def header_values(self, name: str) -> list[str] | None:
        return header_values(self.headers, name)

    def header(self, name: str) -> str | None:
        return header_value(self.headers, name)

    @property
    def text(self) -> str:
        """Body decoded with the charset declared in Content-Type (UTF-8 otherwise)."""
        from .utils import parse_content_type_charset

        charset = parse_content_type_charset(self.header("Content-Type"))
        try:
            return self.body.decode(charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    @property
    def cookies(self) -> dict[str, Cookie]:
        """Cookies set by this response, keyed by name (last one wins)."""
        from .utils import parse_cookie_header_string

        cookies: dict[str, Cookie] = {}
        for value in self.header_values("Set-Cookie") or []:
            cookies.update(parse_cookie_header_string(value))
        return cookies


__all__ = ["Cookie", "Headers", "HttpRequest", "HttpResponse"]
