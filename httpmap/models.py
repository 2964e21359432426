"""Request and Response dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from ._coerce import Version
    from .body import Body

HeaderValue = Union[str, list[str]]


@dataclass(frozen=True)
class Request:
    """Built HTTP request, ready to be passed once to a send operation.

    Attributes:
        uri: Absolute request URI.
        method: Upper-case HTTP method name.
        headers: Ordered (name, value) pairs. A name may repeat.
        body: Body strategy, or None for no body.
        timeout: Per-request timeout in seconds (or an ``httpx.Timeout``).
        version: Preferred protocol version for this request.
    """

    uri: str
    method: str = "GET"
    headers: tuple[tuple[str, str], ...] = ()
    body: Body | None = None
    timeout: Any = None
    version: Version | None = None

    def header_values(self, name: str) -> list[str]:
        """Values of a header, in order, matched case-insensitively."""
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]


@dataclass(frozen=True)
class Response:
    """Canonical, transport-independent HTTP response.

    Attributes:
        status: HTTP status code.
        body: Response body (str, bytes or a readable stream, depending on
              the body-handling mode chosen before sending).
        version: Protocol version keyword ("http1.1", "http2"), or the
                 transport's literal version string when it has no keyword.
        headers: Header name to a single value, or to the ordered list of
                 values when the header was received more than once.
    """

    status: int
    body: Any
    version: str
    headers: dict[str, HeaderValue] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= self.status < 300

    def to_dict(self) -> dict[str, Any]:
        """Plain map form of the response."""
        return {
            "status": self.status,
            "body": self.body,
            "version": self.version,
            "headers": {
                name: list(value) if isinstance(value, list) else value
                for name, value in self.headers.items()
            },
        }


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class ConfigurationError(HTTPClientError, ValueError):
    """Malformed or unrecognized option value."""

    def __init__(self, message: str, option: str | None = None):
        super().__init__(message)
        self.option = option


class TransportError(HTTPClientError):
    """Error during HTTP transport (connection, protocol, TLS, etc.)."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class HTTPTimeoutError(TransportError):
    """The configured timeout elapsed before a response arrived."""
    pass
