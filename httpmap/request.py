"""Request construction from declarative request maps."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

import httpx

from ._coerce import Version, method_name, to_seconds
from .body import Body, encode_body
from .config import RequestConfig
from .models import ConfigurationError, Request


def expand_headers(headers: Mapping[str, str | Sequence[str]] | None) -> list[tuple[str, str]]:
    """Flatten a header map into (name, value) pairs.

    A sequence value becomes one pair per element, in order.
    """
    pairs: list[tuple[str, str]] = []
    for name, value in (headers or {}).items():
        if isinstance(value, str):
            pairs.append((name, value))
        else:
            pairs.extend((name, item) for item in value)
    return pairs


class RequestBuilder:
    """Collects request options and builds an immutable Request."""

    def __init__(self) -> None:
        self._uri: str | None = None
        self._method = "GET"
        self._body: Body | None = None
        self._headers: list[tuple[str, str]] = []
        self._timeout: Any = None
        self._version: Version | None = None
        self._expect_continue: bool | None = None

    def uri(self, uri: str | httpx.URL) -> "RequestBuilder":
        """Set the request URI.

        Raises:
            ConfigurationError: If the URI is not an absolute http(s) URI.
        """
        try:
            url = httpx.URL(uri)
        except (httpx.InvalidURL, TypeError) as e:
            raise ConfigurationError(f"invalid URI {uri!r}: {e}", option="uri") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(f"invalid URI {uri!r}: expected an http(s) URI", option="uri")
        self._uri = str(url)
        return self

    def method(self, method: Any, body: Any = None) -> "RequestBuilder":
        """Set the method together with its body strategy.

        The body is not checked against the method; a GET with a body is
        passed on to the transport as is.
        """
        self._method = method_name(method)
        self._body = encode_body(body)
        return self

    def header(self, name: str, value: str) -> "RequestBuilder":
        """Add one header entry. Repeated names are kept in order."""
        self._headers.append((name, value))
        return self

    def headers(self, pairs: Iterable[tuple[str, str]]) -> "RequestBuilder":
        for name, value in pairs:
            self.header(name, value)
        return self

    def timeout(self, value: Any) -> "RequestBuilder":
        """Request timeout, int milliseconds or a duration."""
        self._timeout = to_seconds(value)
        return self

    def version(self, version: Version | str) -> "RequestBuilder":
        self._version = Version.coerce(version, "version")
        return self

    def expect_continue(self, enable: bool) -> "RequestBuilder":
        self._expect_continue = bool(enable)
        return self

    def build(self) -> Request:
        """Build the Request.

        Raises:
            ConfigurationError: If no URI was set.
        """
        if self._uri is None:
            raise ConfigurationError("missing URI", option="uri")

        headers = self._headers
        if self._expect_continue is not None:
            headers = [(k, v) for k, v in headers if k.lower() != "expect"]
            if self._expect_continue:
                headers.append(("Expect", "100-continue"))

        return Request(
            uri=self._uri,
            method=self._method,
            headers=tuple(headers),
            body=self._body,
            timeout=self._timeout,
            version=self._version,
        )


def _request_config(config: RequestConfig | Mapping[str, Any] | None, fields: dict) -> RequestConfig:
    if isinstance(config, RequestConfig):
        return replace(config, **fields) if fields else config
    return RequestConfig.from_mapping({**(config or {}), **fields})


def request_builder(
    config: RequestConfig | Mapping[str, Any] | None = None,
    **fields: Any,
) -> RequestBuilder:
    """Same as make_request(), but returns the RequestBuilder instead of the Request."""
    config = _request_config(config, fields)
    builder = RequestBuilder()
    if config.expect_continue is not None:
        builder.expect_continue(config.expect_continue)
    if config.headers:
        builder.headers(expand_headers(config.headers))
    if config.method:
        builder.method(config.method, config.body)
    if config.timeout is not None:
        builder.timeout(config.timeout)
    if config.uri is not None:
        builder.uri(config.uri)
    if config.version is not None:
        builder.version(config.version)
    return builder


def make_request(
    config: RequestConfig | Mapping[str, Any] | None = None,
    **fields: Any,
) -> Request:
    """Build a Request from a request map.

    The map takes the following keys:

    - ``body`` - str, bytes, a readable binary stream or an iterable of bytes
    - ``expect-continue?`` - True or False; omitted leaves headers alone
    - ``headers`` - map of name to a string or a list of strings
    - ``method`` - HTTP method keyword (``"get"``, ``"post"``, ...)
    - ``timeout`` - int milliseconds or a duration
    - ``uri`` - the request URI
    - ``version`` - ``"http1.1"`` or ``"http2"``

    Raises:
        ConfigurationError: On a missing URI or unrecognized options.
    """
    return request_builder(config, **fields).build()
