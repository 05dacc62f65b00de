# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from scenariohttp.config import Config
from scenariohttp.errors import HttpExecutionError
from scenariohttp.http.adapters import StubHttpClient
from scenariohttp.http.client import create_default_http_client, create_http_client
from scenariohttp.http.host import HostRequest, HostResponse
from scenariohttp.http.httpx_client import HttpxClient
from scenariohttp.http.inprocess import InProcessHttpClient
from scenariohttp.http.models import HttpRequest, HttpResponse


def test_stub_http_client_returns_registered_responses():
    stub = StubHttpClient()
    custom_resp = HttpResponse(status_code=200, body=b"hello")
    stub.add("http://example", custom_resp)
    request = HttpRequest(url="http://example")
    result = stub.invoke(request)
    assert result.text == "hello"
    assert request.elapsed_millis is not None
    with pytest.raises(HttpExecutionError):
        stub.invoke(HttpRequest(url="http://missing"))
    assert [r.url for r in stub.requests] == ["http://example", "http://missing"]


def test_stub_http_client_records_configuration_changes():
    stub = StubHttpClient()
    updated = stub.get_config().with_option("followRedirects", False)
    stub.configure(updated, "followRedirects")
    stub.configure(updated)
    assert stub.get_config() is updated
    assert stub.changed_keys == ["followRedirects", None]
    assert stub.get_logger().name == "scenariohttp.stub"


def test_create_http_client_picks_backend():
    class Service:
        def service(self, request: HostRequest, response: HostResponse) -> None:
            response.write("ok")

    cfg = Config(read_timeout_millis=1000)
    in_process = create_http_client(cfg, service=Service())
    assert isinstance(in_process, InProcessHttpClient)
    assert in_process.get_config() is cfg
    assert in_process.invoke(HttpRequest(url="http://localhost/")).text == "ok"

    network = create_http_client(cfg)
    try:
        assert isinstance(network, HttpxClient)
        assert network.get_config() is cfg
    finally:
        network.close()


def test_create_default_http_client_reads_env(monkeypatch):
    monkeypatch.setenv("SCENARIOHTTP_CONNECT_TIMEOUT", "1234")
    client = create_default_http_client()
    try:
        assert isinstance(client, HttpxClient)
        assert client.get_config().connect_timeout_millis == 1234
    finally:
        client.close()


def test_backends_are_interchangeable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Type": "text/plain"}, content=b"same")

    class Service:
        def service(self, request: HostRequest, response: HostResponse) -> None:
            response.add_header("Content-Type", "text/plain")
            response.write(b"same")

    clients = [
        HttpxClient(Config(), transport=httpx.MockTransport(handler)),
        InProcessHttpClient(Service(), Config()),
        StubHttpClient({"http://localhost/": HttpResponse(200, {"Content-Type": ["text/plain"]}, b"same")}),
    ]
    for client in clients:
        response = client.invoke(HttpRequest(url="http://localhost/"))
        assert (response.status_code, response.text) == (200, "same")
        client.close()
