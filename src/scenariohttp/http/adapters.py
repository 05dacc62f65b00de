# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable HttpClient for engine tests and dry runs."""

from __future__ import annotations

import logging

from ..config import Config
from ..errors import HttpExecutionError
from ..log import get_logger
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """Deterministic, programmable HttpClient for tests."""

    def __init__(self, responses: dict[str, HttpResponse] | None = None, config: Config | None = None):
        self._responses = responses or {}
        self._config = config or Config()
        self._logger = get_logger("stub")
        self.requests: list[HttpRequest] = []
        self.changed_keys: list[str | None] = []

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    def invoke(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        request.mark_start()
        if request.url not in self._responses:
            raise HttpExecutionError(f"no stubbed response configured for {request.url}")
        request.mark_end()
        return self._responses[request.url]

    def configure(self, config: Config, changed_key: str | None = None) -> None:
        self._config = config
        self.changed_keys.append(changed_key)

    def get_config(self) -> Config:
        return self._config

    def get_logger(self) -> logging.Logger:
        return self._logger

    def close(self) -> None:
        return None


__all__ = ["StubHttpClient"]
