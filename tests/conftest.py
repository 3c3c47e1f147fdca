"""Shared fakes: an in-memory live transport and an httpx mock backend."""

import asyncio
import json
from typing import Any, Callable, Optional

import httpx
import pytest

from genai_client import AsyncGenAI
from genai_client.transport.websocket import CloseEvent, WebSocketFactory


class FakeTransport:
    """Records sent frames; the test drives the inbound side."""

    def __init__(self, factory: "FakeWebSocketFactory", url: str, headers: dict[str, str], **callbacks: Any):
        self.factory = factory
        self.url = url
        self.headers = headers
        self.on_open = callbacks.get("on_open")
        self.on_message = callbacks.get("on_message")
        self.on_error = callbacks.get("on_error")
        self.on_close = callbacks.get("on_close")
        self.sent: list[dict[str, Any]] = []
        self.closed = False

    async def connect(self) -> None:
        if self.factory.connect_error is not None:
            raise self.factory.connect_error
        if self.on_open:
            self.on_open()

    def send(self, message: str) -> None:
        frame = json.loads(message)
        self.sent.append(frame)
        if "setup" in frame and self.factory.on_setup is not None:
            asyncio.get_running_loop().call_soon(self.factory.on_setup, self)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.on_close:
            asyncio.get_running_loop().call_soon(self.on_close, CloseEvent(code=1000, reason=""))

    # Inbound side
    def deliver(self, payload: Any) -> None:
        self.on_message(payload if isinstance(payload, str) else json.dumps(payload))

    def fail(self, error: BaseException) -> None:
        self.on_error(error)

    def remote_close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = True
        self.on_close(CloseEvent(code=code, reason=reason))


def acknowledge_setup(transport: FakeTransport) -> None:
    transport.deliver({"setupComplete": {}})


class FakeWebSocketFactory(WebSocketFactory):
    def __init__(self, on_setup: Optional[Callable[[FakeTransport], None]] = acknowledge_setup):
        self.on_setup = on_setup
        self.connect_error: Optional[BaseException] = None
        self.transports: list[FakeTransport] = []

    def create(self, url: str, headers: dict[str, str], **callbacks: Any) -> FakeTransport:
        transport = FakeTransport(self, url, headers, **callbacks)
        self.transports.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.transports[-1]


class MockBackend:
    """httpx.MockTransport handler with canned responses keyed by (method, path)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response: Any) -> None:
        """`response` is a JSON body, an httpx.Response, or a list of either (served in order)."""
        self.routes[(method, path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": {"code": 404, "message": f"no route {request.url.path}"}})
        if isinstance(route, list):
            route = route.pop(0)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def ws_factory() -> FakeWebSocketFactory:
    return FakeWebSocketFactory()


@pytest.fixture
def client(backend: MockBackend, ws_factory: FakeWebSocketFactory, monkeypatch: pytest.MonkeyPatch) -> AsyncGenAI:
    for var in ("GOOGLE_GENAI_USE_VERTEXAI", "GOOGLE_CLOUD_PROJECT", "GOOGLE_CLOUD_LOCATION"):
        monkeypatch.delenv(var, raising=False)
    return AsyncGenAI(
        api_key="test-key",
        transport=httpx.MockTransport(backend),
        websocket_factory=ws_factory,
    )


@pytest.fixture
def vertex_client(backend: MockBackend, ws_factory: FakeWebSocketFactory) -> AsyncGenAI:
    return AsyncGenAI(
        vertexai=True,
        project="proj",
        location="us-central1",
        access_token="token",
        transport=httpx.MockTransport(backend),
        websocket_factory=ws_factory,
    )
