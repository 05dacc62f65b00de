# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    SERVICE_ERROR = "SERVICE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ScenarioHttpError(Exception):
    """Base class for errors raised by scenariohttp."""


class ConfigurationError(ScenarioHttpError):
    """A Config snapshot could not be turned into transport state."""


class HttpExecutionError(ScenarioHttpError):
    """A single `invoke` call failed; the cause is chained on `__cause__`."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR):
        super().__init__(message)
        self.category = category

    @classmethod
    def from_exception(cls, exc: BaseException, category: ErrorCategory | None = None) -> HttpExecutionError:
        message = str(exc) or type(exc).__name__
        return cls(message, category or categorize_exception(exc))


def _causes(exc: BaseException):
    """Yield the chained causes of `exc`, innermost last."""
    seen = {id(exc)}
    cause = exc.__cause__ or exc.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        yield cause
        cause = cause.__cause__ or cause.__context__


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps transport failures twice (httpx over httpcore over the socket
    error), so connection errors are classified by walking the whole cause chain.
    """
    import httpx

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        for cause in _causes(exc):
            if isinstance(cause, (ssl.SSLError, ssl.CertificateError)):
                return ErrorCategory.SSL_ERROR
            if isinstance(cause, (socket.gaierror, socket.herror)):
                return ErrorCategory.DNS_ERROR
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl.SSLError, ssl.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, TimeoutError):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, ConnectionError):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "HttpExecutionError",
    "ScenarioHttpError",
    "categorize_exception",
]
