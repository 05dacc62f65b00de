# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

from scenariohttp.config import Config
from scenariohttp.http.headers import headers_from_raw, iter_header_pairs, normalize_headers
from scenariohttp.http.logger import HttpLogger
from scenariohttp.http.models import HttpRequest, HttpResponse
from scenariohttp.log import get_logger, setup_logging


def test_normalize_headers_keeps_first_casing_and_all_values():
    headers = normalize_headers(
        [("Accept", "text/html"), ("accept", "application/json"), (None, "x"), ("  ", "y"), ("X-Empty", None)]
    )
    assert headers == {"Accept": ["text/html", "application/json"], "X-Empty": [""]}
    assert normalize_headers({"A": ["1", "2"], "B": 3}) == {"A": ["1", "2"], "B": ["3"]}
    assert normalize_headers(None) == {}


def test_headers_from_raw_and_pairs():
    headers = headers_from_raw([(b"Set-Cookie", b"a=1"), (b"set-cookie", b"b=2"), (b"X-Id", b"\xe9")])
    assert headers == {"Set-Cookie": ["a=1", "b=2"], "X-Id": ["é"]}
    assert list(iter_header_pairs(headers)) == [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("X-Id", "é")]


def test_request_header_access_is_case_insensitive():
    request = HttpRequest(url="http://example")
    assert request.header("Accept") is None
    request.add_header("Accept", "text/html")
    request.add_header("ACCEPT", "text/plain")
    assert request.header_values("accept") == ["text/html", "text/plain"]
    assert list(request.headers) == ["Accept"]


def test_request_timing():
    request = HttpRequest(url="http://example")
    assert request.elapsed_millis is None
    request.mark_start(1000)
    request.mark_end(1250)
    assert request.elapsed_millis == 250
    request.mark_end(900)
    assert request.end_time_millis == 1000
    request.mark_start(2000)
    assert request.end_time_millis is None


def test_response_text_and_cookies():
    response = HttpResponse(
        200,
        {"Content-Type": ["text/plain; charset=ISO-8859-1"], "Set-Cookie": ["a=1; Path=/", "b=2", "a=3"]},
        "café".encode("latin-1"),
    )
    assert response.text == "café"
    cookies = response.cookies
    assert sorted(cookies) == ["a", "b"]
    assert cookies["a"].value == "3"
    assert HttpResponse(200, {"Content-Type": ["text/plain; charset=bogus"]}, b"ok").text == "ok"
    assert HttpResponse(204).body == b""


def test_http_logger_writes_debug_entries(caplog):
    http_logger = HttpLogger()
    request = HttpRequest(url="http://example/a", headers={"Accept": ["*/*"]})
    with caplog.at_level(logging.DEBUG, logger="scenariohttp"):
        http_logger.log_request(Config(), request)
        request.mark_start(10)
        request.mark_end(35)
        http_logger.log_response(Config(), request, HttpResponse(200, {"X": ["1"]}, b"abc"))
    messages = [record.getMessage() for record in caplog.records]
    assert messages[0].startswith("1 > GET http://example/a")
    assert "Accept: */*" in messages[0]
    assert messages[1].startswith("1 < 200 (25 ms)")
    assert messages[1].endswith("3 bytes")


def test_logger_names(monkeypatch):
    assert get_logger().name == "scenariohttp"
    assert get_logger("http").name == "scenariohttp.http"
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    setup_logging("debug")
    assert calls["level"] == logging.DEBUG
