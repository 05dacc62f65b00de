# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Parsing and matching helpers shared by the engine and the backends.

Everything here is total: malformed input yields a default, None or an empty
mapping instead of raising, so callers can feed raw header text straight in.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from email.utils import formatdate

from .models import Cookie

DEFAULT_CHARSET = "UTF-8"

_SET_COOKIE_LABEL = "set-cookie:"
_COOKIE_LABEL = "cookie:"
_COOKIE_ATTRIBUTES = frozenset(
    {
        "comment",
        "commenturl",
        "discard",
        "domain",
        "expires",
        "httponly",
        "max-age",
        "path",
        "port",
        "samesite",
        "secure",
        "version",
    }
)


def parse_content_type_charset(header: str | None) -> str:
    """Return the `charset` parameter of a Content-Type value, or UTF-8."""
    if not header:
        return DEFAULT_CHARSET
    for segment in header.split(";")[1:]:
        key, sep, value = segment.partition("=")
        if sep and key.strip().lower() == "charset":
            charset = value.strip().strip('"').strip()
            if charset:
                return charset
    return DEFAULT_CHARSET


def parse_content_type_params(header: str | None) -> dict[str, str] | None:
    """
    Return Content-Type parameters in declared order, or None when there are none.

    `"application/json; charset = UTF-8 ; version=1.2.3"` gives
    `{"charset": "UTF-8", "version": "1.2.3"}`.
    """
    if not header:
        return None
    segments = header.split(";")
    if len(segments) < 2:
        return None
    params: dict[str, str] = {}
    for segment in segments[1:]:
        key, sep, value = segment.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        params[key] = value.strip()
    return params or None


def _split_path(value: str) -> list[str]:
    if value.endswith("/"):
        value = value[:-1]
    return value.split("/")


def _placeholder_name(segment: str) -> str | None:
    if len(segment) > 2 and segment.startswith("{") and segment.endswith("}"):
        return segment[1:-1]
    return None


def parse_uri_pattern(pattern: str | None, path: str | None) -> dict[str, str] | None:
    """
    Match a concrete path against a `{name}` template.

    Returns the captured segments (raw, never decoded) keyed by placeholder name,
    an empty dict for a literal match, or None when the path does not match.
    """
    if pattern is None or path is None:
        return None
    pattern_segments = _split_path(pattern)
    path_segments = _split_path(path)
    if len(pattern_segments) != len(path_segments):
        return None
    bindings: dict[str, str] = {}
    for template, segment in zip(pattern_segments, path_segments):
        name = _placeholder_name(template)
        if name is None:
            if template != segment:
                return None
        elif not segment:
            return None
        else:
            bindings[name] = segment
    return bindings


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _apply_cookie_attribute(cookie: Cookie, name: str, value: str) -> None:
    value = _unquote(value)
    if name == "path":
        cookie.path = value or None
    elif name == "domain":
        cookie.domain = value or None
    elif name == "max-age":
        try:
            cookie.max_age = int(value)
        except ValueError:
            pass
    elif name == "secure":
        cookie.secure = True
    elif name == "httponly":
        cookie.http_only = True


def _strip_label(header: str) -> str:
    text = header.strip()
    lower = text.lower()
    for label in (_SET_COOKIE_LABEL, _COOKIE_LABEL):
        if lower.startswith(label):
            return text[len(label):]
    return text


def _parse_cookies(header: str, *, first_only: bool) -> list[Cookie]:
    cookies: list[Cookie] = []
    for segment in _strip_label(header).split(";"):
        name, sep, value = segment.partition("=")
        name = name.strip()
        if not name:
            continue
        lower = name.lower().lstrip("$")
        # request headers only carry attributes in the $Path / $Domain form
        is_attribute = name.startswith("$") or (first_only and lower in _COOKIE_ATTRIBUTES)
        if cookies and is_attribute:
            _apply_cookie_attribute(cookies[-1], lower, value)
            continue
        if not sep or name.startswith("$"):
            continue
        if cookies and first_only:
            continue
        cookies.append(Cookie(name=name, value=_unquote(value)))
    return cookies


def parse_cookie_header_string(header: str | None) -> dict[str, Cookie]:
    """
    Decode a `Set-Cookie` style value into `{name: Cookie}`.

    Only the first `name=value` pair is a cookie; recognised attributes such as
    `Path` or `Version` update it and never produce entries of their own.
    """
    if not header:
        return {}
    return {cookie.name: cookie for cookie in _parse_cookies(header, first_only=True)}


def parse_cookie_request_header(header: str | None) -> list[Cookie]:
    """
    Decode a request `Cookie` header (`a=1; b=2`) into every cookie it carries.

    Names such as `path` or `version` are ordinary cookies here; only the
    `$`-prefixed RFC 2965 forms (`$Path`, `$Domain`) set attributes.
    """
    if not header:
        return []
    return _parse_cookies(header, first_only=False)


def create_cookie_header_value(cookies: Iterable[Cookie]) -> str:
    """Encode cookies for a request `Cookie` header; attributes are ignored."""
    return "; ".join(f"{cookie.name}={cookie.value}" for cookie in cookies)


def create_set_cookie_header_value(cookie: Cookie) -> str:
    """Encode one cookie as a `Set-Cookie` header value."""
    parts = [f"{cookie.name}={cookie.value}"]
    if cookie.max_age is not None:
        parts.append(f"Max-Age={cookie.max_age}")
        parts.append(f"Expires={formatdate(time.time() + cookie.max_age, usegmt=True)}")
    if cookie.path:
        parts.append(f"Path={cookie.path}")
    if cookie.domain:
        parts.append(f"Domain={cookie.domain}")
    if cookie.secure:
        parts.append("Secure")
    if cookie.http_only:
        parts.append("HTTPOnly")
    return "; ".join(parts)


__all__ = [
    "DEFAULT_CHARSET",
    "create_cookie_header_value",
    "create_set_cookie_header_value",
    "parse_content_type_charset",
    "parse_content_type_params",
    "parse_cookie_header_string",
    "parse_cookie_request_header",
    "parse_uri_pattern",
]
