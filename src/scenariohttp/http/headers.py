# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110), but the engine shows
headers to users exactly as they went over the wire. Header maps therefore keep
the first-seen casing of each name, hold every value of a repeated header as a
separate list entry, and are read with case-insensitive lookups.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

Headers = dict[str, list[str]]


def _find_key(headers: Mapping[str, Any], name: str) -> str | None:
    if name in headers:
        return name
    lower = name.lower()
    for key in headers:
        if key is not None and str(key).lower() == lower:
            return key
    return None


def add_header(headers: Headers, name: str, value: str) -> None:
    """Append a value, reusing the existing casing when the name is already present."""
    key = _find_key(headers, name)
    if key is None:
        headers[name] = [value]
    else:
        headers[key].append(value)


def remove_header(headers: Headers, name: str) -> list[str] | None:
    """Drop every value of a header (any casing); returns what was removed."""
    key = _find_key(headers, name)
    if key is None:
        return None
    return headers.pop(key)


def normalize_headers(headers: Mapping[Any, Any] | Iterable[tuple[Any, Any]] | None) -> Headers:
    """
    Build a wire-shaped header map from a mapping or an iterable of pairs.

    Mapping values may be a single string or an iterable of strings. None keys
    and blank names are dropped; None values become empty strings.
    """
    out: Headers = {}
    if not headers:
        return out
    items = headers.items() if isinstance(headers, Mapping) else headers
    for key, value in items:
        if key is None:
            continue
        name = str(key).strip()
        if not name:
            continue
        if isinstance(value, (list, tuple)):
            values = value
        else:
            values = [value]
        for item in values:
            add_header(out, name, "" if item is None else str(item))
    return out


def headers_from_raw(raw: Iterable[tuple[bytes, bytes]], encoding: str = "latin-1") -> Headers:
    """Convert httpx-style raw header pairs into a header map, preserving name casing."""
    return normalize_headers(
        (key.decode(encoding), value.decode(encoding)) for key, value in raw
    )


def header_values(headers: Mapping[str, list[str]] | None, name: str) -> list[str] | None:
    """Return every value of a header using case-insensitive key matching, or None."""
    if not headers or not name:
        return None
    key = _find_key(headers, name)
    if key is None:
        return None
    return list(headers[key])


def header_value(headers: Mapping[str, list[str]] | None, name: str, default: str | None = None) -> str | None:
    """Return the first value of a header, or `default`."""
    values = header_values(headers, name)
    if not values:
        return default
    return values[0]


def iter_header_pairs(headers: Mapping[str, list[str]] | None) -> Iterable[tuple[str, str]]:
    """Flatten a header map into (name, value) pairs in insertion order."""
    for name, values in (headers or {}).items():
        for value in values:
            yield name, value


__all__ = [
    "Headers",
    "add_header",
    "header_value",
    "header_values",
    "headers_from_raw",
    "iter_header_pairs",
    "normalize_headers",
    "remove_header",
]
