"""Shared test fixtures and configuration."""

from typing import Callable, Generator

import httpx
import pytest

from httpmap import Client, make_client, reset_default_client, set_default_client


class RecordingHandler:
    """MockTransport handler that records every request it receives."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


# ============== Handler Fixtures ==============

@pytest.fixture
def ok_handler() -> RecordingHandler:
    """Handler answering 200 with the text body "ok"."""
    return RecordingHandler(lambda request: httpx.Response(200, content=b"ok"))


@pytest.fixture
def cookie_handler() -> RecordingHandler:
    """Handler answering with one Content-Type and two Set-Cookie headers."""
    return RecordingHandler(
        lambda request: httpx.Response(
            200,
            headers=[
                ("Content-Type", "text/plain"),
                ("Set-Cookie", "a=1"),
                ("Set-Cookie", "b=2"),
            ],
            content=b"cookies",
        )
    )


@pytest.fixture
def connect_error_handler() -> RecordingHandler:
    """Handler failing every request with a connection error."""

    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return RecordingHandler(fail)


@pytest.fixture
def timeout_handler() -> RecordingHandler:
    """Handler failing every request with a read timeout."""

    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    return RecordingHandler(fail)


@pytest.fixture
def echo_handler() -> RecordingHandler:
    """Handler answering with the request body."""
    return RecordingHandler(lambda request: httpx.Response(200, content=request.content))


# ============== Client Fixtures ==============

@pytest.fixture
def client(ok_handler: RecordingHandler) -> Generator[Client, None, None]:
    """Client whose transport answers 200 "ok"."""
    client = make_client(transport=httpx.MockTransport(ok_handler))
    yield client
    client.close()


@pytest.fixture
def default_ok_client(client: Client) -> Generator[Client, None, None]:
    """Install the "ok" client as the process-wide default."""
    set_default_client(client)
    yield client
    reset_default_client()


@pytest.fixture(autouse=True)
def _isolate_default_client() -> Generator[None, None, None]:
    reset_default_client()
    yield
    reset_default_client()


@pytest.fixture
def recording() -> type[RecordingHandler]:
    """The RecordingHandler class, for tests with their own responses."""
    return RecordingHandler
