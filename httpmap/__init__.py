"""Configuration-driven HTTP client layer over httpx.

This package turns declarative descriptions of clients, requests and
response handling into httpx calls, and converts httpx responses into a
uniform canonical Response:

- Clients built from option maps, applying only the options given
- Requests built from request maps, with repeated headers and
  text/bytes/stream bodies
- Blocking send and non-blocking send returning a Future, with
  callback and error-handler stages
- A lazily created process-wide default client

Basic usage:

    from httpmap import get, make_client, send, send_async

    response = get("https://example.com")
    print(response.status, response.headers.get("Content-Type"))

    # Request map and options
    response = send(
        {
            "uri": "https://example.com/upload",
            "method": "post",
            "headers": {"Accept": ["text/plain", "application/json"]},
            "body": b"payload",
            "timeout": 5000,
        },
        {"as": "byte-array"},
    )

    # Non-blocking
    future = send_async(
        "https://example.com",
        callback=lambda r: r.status,
        error_handler=lambda e: -1,
    )
    print(future.result())

    # Custom client
    client = make_client({"follow-redirects": "normal", "version": "http2"})
    response = send("https://example.com", client=client)
"""

from ._coerce import BodyMode, Redirect, Version, to_seconds
from ._debug import DebugInfo, DebugOutput
from .api import delete, get, head, post, put, send, send_async
from .body import BytesBody, ResponseStream, StreamBody, TextBody, encode_body
from .client import (
    Client,
    ClientBuilder,
    client_builder,
    default_client,
    make_client,
    reset_default_client,
    set_default_client,
)
from .config import ClientConfig, RequestConfig, SendOptions, SSLParameters
from .futures import exceptionally, then_apply
from .models import (
    ConfigurationError,
    HTTPClientError,
    HTTPTimeoutError,
    Request,
    Response,
    TransportError,
)
from .normalize import collapse_headers, to_canonical
from .request import RequestBuilder, make_request, request_builder

__version__ = "0.1.0"

__all__ = [
    # Send operations
    "send",
    "send_async",
    "get",
    "head",
    "post",
    "put",
    "delete",
    # Clients
    "Client",
    "ClientBuilder",
    "client_builder",
    "make_client",
    "default_client",
    "set_default_client",
    "reset_default_client",
    # Requests
    "RequestBuilder",
    "request_builder",
    "make_request",
    # Responses
    "to_canonical",
    "collapse_headers",
    # Configuration
    "ClientConfig",
    "RequestConfig",
    "SendOptions",
    "SSLParameters",
    "BodyMode",
    "Redirect",
    "Version",
    "to_seconds",
    # Bodies
    "TextBody",
    "BytesBody",
    "StreamBody",
    "ResponseStream",
    "encode_body",
    # Futures
    "then_apply",
    "exceptionally",
    # Models
    "Request",
    "Response",
    # Exceptions
    "HTTPClientError",
    "ConfigurationError",
    "TransportError",
    "HTTPTimeoutError",
    # Debugging
    "DebugInfo",
    "DebugOutput",
    # Version
    "__version__",
]
