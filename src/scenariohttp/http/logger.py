# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request/response log entries written around every `invoke`."""

from __future__ import annotations

import itertools
import logging

from ..config import Config
from ..log import get_logger
from .headers import iter_header_pairs
from .models import HttpRequest, HttpResponse


def _format_headers(headers) -> str:  # noqa: ANN001
    return "\n".join(f"{name}: {value}" for name, value in iter_header_pairs(headers))


class HttpLogger:
    """
    Default request/response logger.

    Backends call `log_request` once the final wire headers are known and
    `log_response` after the body has been read. The Config is passed along so a
    richer logger can decide what to print; this one ignores it.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or get_logger("http")
        self._counter = itertools.count(1)
        self._ids: dict[int, int] = {}

    @property
    def in_flight(self) -> int:
        """Requests logged whose response entry has not been written yet."""
        return len(self._ids)

    def log_request(self, config: Config, request: HttpRequest) -> None:  # noqa: ARG002
        request_id = next(self._counter)
        self._ids[id(request)] = request_id
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        self.logger.debug(
            "%d > %s %s\n%s",
            request_id,
            request.method,
            request.url,
            _format_headers(request.headers),
        )

    def log_response(self, config: Config, request: HttpRequest, response: HttpResponse) -> None:  # noqa: ARG002
        request_id = self._ids.pop(id(request), 0)
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        self.logger.debug(
            "%d < %d (%s ms)\n%s\n%d bytes",
            request_id,
            response.status_code,
            request.elapsed_millis,
            _format_headers(response.headers),
            len(response.body),
        )

    def discard(self, request: HttpRequest) -> None:
        """Forget a request that will never get a response entry (the invoke failed)."""
        self._ids.pop(id(request), None)


__all__ = ["HttpLogger"]
