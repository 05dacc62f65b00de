# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from scenariohttp.config import Config
from scenariohttp.errors import ErrorCategory, HttpExecutionError
from scenariohttp.http.host import HostRequest, HostResponse, WsgiService
from scenariohttp.http.inprocess import InProcessHttpClient
from scenariohttp.http.logger import HttpLogger
from scenariohttp.http.models import HttpRequest


class EchoService:
    def __init__(self):
        self.seen: list[HostRequest] = []

    def service(self, request: HostRequest, response: HostResponse) -> None:
        self.seen.append(request)
        response.status = 200
        response.add_header("Content-Type", "text/plain; charset=UTF-8")
        response.add_header("X-Multi", "1")
        response.add_header("X-Multi", "2")
        response.set_cookie("session", "abc", path="/", domain="localhost", http_only=True)
        response.write(f"{request.method} {request.uri}")


def test_invoke_translates_request_and_response():
    service = EchoService()
    client = InProcessHttpClient(service, Config())
    request = HttpRequest(
        url="http://localhost/cats?id=1",
        method="post",
        headers={"Accept": ["text/plain"], "X-Multi": ["a", "b"], "Cookie": ["foo=bar; hello=world"]},
        body=b"payload",
    )

    response = client.invoke(request)

    host_request = service.seen[0]
    assert host_request.method == "POST"
    assert host_request.uri == "http://localhost/cats?id=1"
    assert host_request.body == b"payload"
    assert host_request.header_values("x-multi") == ["a", "b"]
    assert host_request.header_values("Cookie") is None
    assert [(m.key, m.value) for m in host_request.cookies] == [("foo", "bar"), ("hello", "world")]

    assert response.status_code == 200
    assert response.text == "POST http://localhost/cats?id=1"
    assert response.header_values("X-Multi") == ["1", "2"]
    set_cookies = response.header_values("Set-Cookie")
    assert len(set_cookies) == 1
    assert set_cookies[0].startswith("session=abc")
    assert "Path=/" in set_cookies[0]
    assert "HTTPOnly" in set_cookies[0]
    session = response.cookies["session"]
    assert (session.domain, session.http_only) == ("localhost", True)

    # the logged request shows cookies as the host saw them
    assert request.header("Cookie") == "foo=bar; hello=world"
    assert request.end_time_millis >= request.start_time_millis


def test_request_cookie_attributes_are_copied():
    service = EchoService()
    client = InProcessHttpClient(service)
    client.invoke(HttpRequest(url="http://localhost/", headers={"Cookie": ["sid=1; $Path=/app; $Domain=example.com"]}))
    morsel = service.seen[0].cookies[0]
    assert morsel.key == "sid"
    assert morsel["path"] == "/app"
    assert morsel["domain"] == "example.com"


def test_no_set_cookie_header_without_cookies():
    class Plain:
        def service(self, request, response):
            response.status = 404

    response = InProcessHttpClient(Plain()).invoke(HttpRequest(url="http://localhost/missing"))
    assert response.status_code == 404
    assert response.body == b""
    assert response.header_values("Set-Cookie") is None


def test_service_failure_is_wrapped():
    class Broken:
        def service(self, request, response):
            raise RuntimeError("boom")

    client = InProcessHttpClient(Broken())
    with pytest.raises(HttpExecutionError) as excinfo:
        client.invoke(HttpRequest(url="http://localhost/"))
    assert excinfo.value.category is ErrorCategory.SERVICE_ERROR
    assert str(excinfo.value) == "boom"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_invalid_url_is_an_execution_error():
    client = InProcessHttpClient(EchoService())
    with pytest.raises(HttpExecutionError):
        client.invoke(HttpRequest(url="http://localhost:notaport/"))


def test_configure_only_records_config():
    client = InProcessHttpClient(EchoService(), Config())
    updated = Config(follow_redirects=False)
    client.configure(updated, "followRedirects")
    assert client.get_config() is updated


def wsgi_app(environ, start_response):
    body = "|".join(
        [
            environ["REQUEST_METHOD"],
            environ["PATH_INFO"],
            environ.get("QUERY_STRING", ""),
            environ.get("HTTP_COOKIE", ""),
            environ["wsgi.input"].read().decode(),
        ]
    ).encode()
    start_response(
        "201 Created",
        [
            ("Content-Type", "text/plain"),
            ("Set-Cookie", "token=xyz; Path=/; HttpOnly"),
            ("Set-Cookie", "theme=dark"),
        ],
    )
    return [body]


def test_wsgi_service_round_trip():
    client = InProcessHttpClient(WsgiService(wsgi_app))
    response = client.invoke(
        HttpRequest(
            url="/orders?page=2",
            method="PUT",
            headers={"Cookie": ["sid=1"]},
            body=b"data",
        )
    )
    assert response.status_code == 201
    assert response.text == "PUT|/orders|page=2|sid=1|data"
    assert response.header("Content-Type") == "text/plain"
    cookies = response.cookies
    assert cookies["token"].path == "/"
    assert cookies["token"].http_only is True
    assert cookies["theme"].value == "dark"
    assert len(response.header_values("Set-Cookie")) == 2


def test_native_cookies_replace_raw_set_cookie_headers():
    class Both:
        def service(self, request, response):
            response.add_header("set-cookie", "raw=1")
            response.set_cookie("native", "2")

    response = InProcessHttpClient(Both()).invoke(HttpRequest(url="http://localhost/"))
    assert response.header_values("Set-Cookie") == ["native=2"]
    assert list(response.cookies) == ["native"]


def test_raw_set_cookie_kept_without_native_cookies():
    class RawOnly:
        def service(self, request, response):
            response.add_header("Set-Cookie", "raw=1")

    response = InProcessHttpClient(RawOnly()).invoke(HttpRequest(url="http://localhost/"))
    assert response.header_values("Set-Cookie") == ["raw=1"]


def test_failed_services_leave_no_log_state_behind():
    class Broken:
        def service(self, request, response):
            raise RuntimeError("boom")

    http_logger = HttpLogger()
    client = InProcessHttpClient(Broken(), http_logger=http_logger)
    for _ in range(20):
        with pytest.raises(HttpExecutionError):
            client.invoke(HttpRequest(url="http://localhost/"))
    assert http_logger.in_flight == 0


def test_reserved_cookie_names_are_dropped_with_a_warning(caplog):
    service = EchoService()
    with caplog.at_level("WARNING"):
        InProcessHttpClient(service).invoke(HttpRequest(url="http://localhost/", headers={"Cookie": ["a=1; path=2"]}))
    assert [m.key for m in service.seen[0].cookies] == ["a"]
    assert "dropping cookie 'path'" in caplog.text
