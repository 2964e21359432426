"""Configuration dataclasses for clients, requests and send options."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Callable, TextIO

from ._coerce import BodyMode, Redirect, Version, to_seconds
from .models import ConfigurationError

if TYPE_CHECKING:
    from concurrent.futures import Executor

    from ._debug import DebugInfo
    from .client import Client


def _option_name(key: str) -> str:
    """Python field name for a declarative option key ("expect-continue?")."""
    name = str(key).lstrip(":").rstrip("?").replace("-", "_")
    return "as_" if name == "as" else name


def _from_mapping(cls, options: Mapping[str, Any] | None):
    known = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in (options or {}).items():
        name = _option_name(key)
        if name not in known:
            raise ConfigurationError(
                f"unrecognized {cls.__name__} option: {key!r}", option=str(key)
            )
        kwargs[name] = value
    return cls(**kwargs)


def _check_timeout(option: str, value: Any) -> None:
    seconds = to_seconds(value)
    if isinstance(seconds, (int, float)) and seconds <= 0:
        raise ConfigurationError(f"{option} must be > 0", option=option)


@dataclass(frozen=True)
class SSLParameters:
    """TLS parameters applied to the client's SSL context.

    Attributes:
        protocols: Allowed protocol versions as ``ssl.TLSVersion`` values;
                   the lowest and highest become the context's bounds.
        ciphers: OpenSSL cipher list string.
        alpn_protocols: ALPN protocol names to advertise.
    """

    protocols: tuple[Any, ...] | None = None
    ciphers: str | None = None
    alpn_protocols: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for a Client.

    Every field is optional. A field left as None leaves the transport's
    own default in place.

    Attributes:
        connect_timeout: Connection timeout, int milliseconds or a duration.
        cookie_handler: Cookie jar shared by requests sent with the client.
        executor: Executor running asynchronous sends.
        follow_redirects: Redirect policy - "never", "always" or "normal".
        priority: HTTP/2 stream priority, 1 to 256.
        proxy: Proxy URL (e.g., "http://host:port") or ``httpx.Proxy``.
        ssl_context: ``ssl.SSLContext`` used for TLS connections.
        ssl_parameters: TLS parameters applied to a context the client
            creates. Cannot be combined with ``ssl_context``.
        version: Preferred HTTP version - "http1.1" or "http2".
        transport: Custom ``httpx.BaseTransport`` (tests, custom stacks).
        verbose: Print each request/response cycle.
        debug_output: Stream for verbose output (defaults to stderr).
        debug_callback: Receives a DebugInfo for each cycle when verbose.
    """

    connect_timeout: Any = None
    cookie_handler: Any = None
    executor: Executor | None = None
    follow_redirects: Redirect | str | None = None
    priority: int | None = None
    proxy: Any = None
    ssl_context: Any = None
    ssl_parameters: SSLParameters | None = None
    version: Version | str | None = None
    transport: Any = None
    verbose: bool = False
    debug_output: TextIO | None = None
    debug_callback: Callable[[DebugInfo], None] | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.follow_redirects is not None:
            object.__setattr__(
                self,
                "follow_redirects",
                Redirect.coerce(self.follow_redirects, "follow-redirects"),
            )
        if self.version is not None:
            object.__setattr__(self, "version", Version.coerce(self.version, "version"))
        if self.connect_timeout is not None:
            _check_timeout("connect-timeout", self.connect_timeout)
        if self.priority is not None and not 1 <= self.priority <= 256:
            raise ConfigurationError("priority must be between 1 and 256", option="priority")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "ClientConfig":
        """Build from a declarative option map ({"follow-redirects": "normal", ...})."""
        return _from_mapping(cls, options)


@dataclass(frozen=True)
class RequestConfig:
    """Declarative description of a request.

    Attributes:
        uri: Request URI. Required when the request is built.
        method: HTTP method keyword (e.g., "get", "post"). When None the
                transport default (GET) is used and ``body`` is ignored.
        headers: Header name to a value or an ordered sequence of values.
        timeout: Request timeout, int milliseconds or a duration.
        version: Preferred HTTP version - "http1.1" or "http2".
        expect_continue: Send ``Expect: 100-continue`` (True), strip any
                         Expect header (False) or leave headers alone (None).
        body: str, bytes, readable binary stream, byte iterable or None.
    """

    uri: str | None = None
    method: Any = None
    headers: Mapping[str, str | Sequence[str]] | None = None
    timeout: Any = None
    version: Version | str | None = None
    expect_continue: bool | None = None
    body: Any = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.version is not None:
            object.__setattr__(self, "version", Version.coerce(self.version, "version"))
        if self.timeout is not None:
            _check_timeout("timeout", self.timeout)
        for name, value in (self.headers or {}).items():
            if isinstance(value, str):
                continue
            if not isinstance(value, Sequence) or not all(isinstance(v, str) for v in value):
                raise ConfigurationError(
                    f"header {name!r} must be a string or a sequence of strings",
                    option="headers",
                )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "RequestConfig":
        """Build from a declarative request map ({"uri": ..., "expect-continue?": True})."""
        return _from_mapping(cls, options)


@dataclass(frozen=True)
class SendOptions:
    """Options for a send call.

    Attributes:
        as_: Body-handling mode - "string" (default), "byte-array" or
             "input-stream". The option key is ``as``.
        client: Client to send with. Defaults to the process-wide client.
        raw: Return the transport response without normalizing it. The
             option key is ``raw?``.
    """

    as_: BodyMode | str | None = BodyMode.STRING
    client: Client | None = None
    raw: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        object.__setattr__(self, "as_", BodyMode.coerce(self.as_))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "SendOptions":
        """Build from a declarative option map ({"as": "byte-array", "raw?": True})."""
        return _from_mapping(cls, options)
