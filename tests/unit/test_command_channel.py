# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from bevelnet.channels.command import CommandChannel
from bevelnet.deferred import DeferredSingle
from bevelnet.errors import HttpStatusError
from bevelnet.http.adapters import StubWebClient
from bevelnet.http.httpx_client import HttpxWebClient

BASE = "http://localhost:9002/api"


@dataclass
class Batch:
    name: str
    items: list


class _ApiHandler(BaseHTTPRequestHandler):
    routes: dict = {}

    def _reply(self, status, body):
        payload = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def do_GET(self):  # noqa: N802
        status, body = self.routes.get(("GET", self.path), (404, "not found"))
        self._reply(status, body)

    def do_POST(self):  # noqa: N802
        length = int(self.headers.get("Content-Length") or 0)
        received = self.rfile.read(length).decode("utf-8")
        self.server.received.append((self.path, self.headers.get("content-type"), received))
        status, body = self.routes.get(("POST", self.path), (404, "not found"))
        self._reply(status, body)

    def log_message(self, *_args):  # noqa: ANN002
        return None


@pytest.fixture
def api_server():
    class Handler(_ApiHandler):
        routes = {
            ("GET", "/api/isAlive"): (200, "true"),
            ("POST", "/api/command"): (200, "PONG"),
        }

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    server.received = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()


def test_command_channel_builds_fixed_endpoints():
    channel = CommandChannel(StubWebClient(), 9002)
    assert channel.base_url == BASE
    assert channel.command_url == f"{BASE}/command"
    assert channel.is_alive_url == f"{BASE}/isAlive"


def test_send_posts_string_verbatim():
    stub = StubWebClient({f"{BASE}/command": "done"})
    channel = CommandChannel(stub, "9002")

    assert channel.send('{"already":"json"}') == "done"

    request = stub.requests[0]
    assert request.method == "POST"
    assert request.url == f"{BASE}/command"
    assert request.body == '{"already":"json"}'
    assert ("content-type", "application/json") in request.headers


def test_send_encodes_structured_messages():
    stub = StubWebClient({f"{BASE}/command": "done"})
    channel = CommandChannel(stub, 9002)

    assert channel.send(Batch(name="files", items=[1, 2])) == "done"
    assert channel.send({"op": "sync"}) == "done"

    assert stub.requests[0].body == '{"name":"files","items":[1,2]}'
    assert stub.requests[1].body == '{"op":"sync"}'


def test_send_returns_empty_string_on_failure():
    stub = StubWebClient({f"{BASE}/command": HttpStatusError(f"{BASE}/command", 500, "boom")})
    assert CommandChannel(stub, 9002).send("x") == ""


def test_send_without_response_triggers_dispatch():
    dispatched = []

    class LazyClient(StubWebClient):
        def send_post(self, url, body, headers=(), query_parameters=()):
            return DeferredSingle(lambda sink: (dispatched.append((url, body)), sink.success("ok")), spawn=False)

    CommandChannel(LazyClient(), 9002).send_without_response("fire")
    assert dispatched == [(f"{BASE}/command", "fire")]


def test_send_without_response_tolerates_results_without_trigger():
    class EagerClient(StubWebClient):
        def send_post(self, url, body, headers=(), query_parameters=()):
            self.requests.append((url, body))
            return "sent"

    client = EagerClient()
    CommandChannel(client, 9002).send_without_response("fire")
    assert client.requests == [(f"{BASE}/command", "fire")]


@pytest.mark.parametrize(
    "body,expected",
    [
        ("true", True),
        (" true\n", True),
        ("false", False),
        ("", False),
        ("not json", False),
        ("1", False),
        ('"true"', False),
        ("null", False),
    ],
)
def test_is_alive_decodes_boolean_body(body, expected):
    stub = StubWebClient({f"{BASE}/isAlive": body})
    channel = CommandChannel(stub, 9002)
    assert channel.is_alive() is expected
    assert channel.is_connected() is expected
    assert stub.requests[0].method == "GET"


def test_is_alive_never_raises():
    class ExplodingClient(StubWebClient):
        def send_get_blocking(self, url, headers=(), query_parameters=()):
            raise RuntimeError("transport exploded")

    assert CommandChannel(ExplodingClient(), 9002).is_alive() is False
    assert CommandChannel(StubWebClient(), 9002).is_alive() is False


def test_close_is_noop_and_leaves_client_open():
    stub = StubWebClient()
    with CommandChannel(stub, 9002) as channel:
        assert channel.close() is None
    assert stub.closed is False


def test_command_channel_against_live_server(api_server):
    port = api_server.server_address[1]
    web_client = HttpxWebClient()
    try:
        channel = CommandChannel(web_client, port, host="127.0.0.1")
        assert channel.is_alive() is True
        assert channel.send("PING") == "PONG"
        assert api_server.received[-1] == ("/api/command", "application/json", "PING")

        api_server.shutdown()
        api_server.server_close()
        assert channel.is_alive() is False
        assert channel.send("PING") == ""
    finally:
        web_client.close()


def test_command_channel_not_found_returns_empty(api_server):
    port = api_server.server_address[1]
    web_client = HttpxWebClient()
    try:
        channel = CommandChannel(web_client, port, host="127.0.0.1")
        assert web_client.send_post_blocking(f"{channel.base_url}/missing", "x") == ""
    finally:
        web_client.close()
