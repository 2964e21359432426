"""Send operations: blocking send, non-blocking send and verb shorthands."""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Future
from dataclasses import replace
from typing import Any, Callable, Union

import httpx

from .client import default_client
from .config import RequestConfig, SendOptions
from .futures import exceptionally, then_apply
from .models import ConfigurationError, Request, Response
from .normalize import to_canonical
from .request import make_request

RequestLike = Union[Request, httpx.Request, RequestConfig, Mapping[str, Any], str]
OptionsLike = Union[SendOptions, Mapping[str, Any], None]


def _send_options(options: OptionsLike, overrides: dict[str, Any]) -> SendOptions:
    if isinstance(options, SendOptions):
        return replace(options, **overrides) if overrides else options
    return SendOptions.from_mapping({**(options or {}), **overrides})


def _convert_request(request: RequestLike) -> Request | httpx.Request:
    if isinstance(request, (Request, httpx.Request)):
        return request
    if isinstance(request, str):
        return make_request({"uri": request})
    if isinstance(request, (RequestConfig, Mapping)):
        return make_request(request)
    raise ConfigurationError(
        f"cannot send a {type(request).__name__}; expected a URI, a request map or a Request",
        option="request",
    )


def send(
    request: RequestLike,
    options: OptionsLike = None,
    **option_fields: Any,
) -> Response | httpx.Response:
    """Send a request and block until the response arrives.

    Args:
        request: URI string, request map / RequestConfig (see make_request),
                 built Request, or a pre-built ``httpx.Request``.
        options: SendOptions or a map with the keys:
                 ``as`` - "string" (default), "byte-array" or "input-stream";
                 ``client`` - Client to use, defaults to default_client();
                 ``raw?`` - return the ``httpx.Response`` unmodified.
        **option_fields: SendOptions fields, applied over ``options``.

    Returns:
        Canonical Response, or the ``httpx.Response`` when ``raw?`` is set.

    Raises:
        ConfigurationError: If the request or options are malformed.
        HTTPTimeoutError: If the request timeout elapsed.
        TransportError: On connection, protocol or TLS errors.
    """
    opts = _send_options(options, option_fields)
    client = opts.client or default_client()
    response = client.send(_convert_request(request), opts.as_)
    if opts.raw:
        return response
    return to_canonical(response, opts.as_)


def send_async(
    request: RequestLike,
    options: OptionsLike = None,
    callback: Callable[[Any], Any] | None = None,
    error_handler: Callable[[BaseException], Any] | None = None,
) -> Future:
    """Send a request without blocking and return a Future of the response.

    The future resolves through these stages, each only when configured
    and always in this order: conversion to a canonical Response (skipped
    when ``raw?`` is set), ``callback`` applied to the response, and
    ``error_handler`` applied to any failure of the request or of an
    earlier stage. The error handler's return value becomes the result.

    See send() for ``request`` and ``options``. Configuration errors are
    raised immediately rather than through the future.

    Examples:
        future = send_async("https://example.com", callback=lambda r: r.status)
        status = future.result()

        # From asyncio code
        response = await asyncio.wrap_future(send_async(url))
    """
    opts = _send_options(options, {})
    client = opts.client or default_client()
    future = client.submit(_convert_request(request), opts.as_)
    if not opts.raw:
        mode = opts.as_
        future = then_apply(future, lambda response: to_canonical(response, mode))
    if callback is not None:
        future = then_apply(future, callback)
    if error_handler is not None:
        future = exceptionally(future, error_handler)
    return future


def _with_method(
    method: str,
    uri: str,
    request_fields: RequestConfig | Mapping[str, Any] | None,
) -> RequestConfig | dict[str, Any]:
    if isinstance(request_fields, RequestConfig):
        return replace(request_fields, uri=uri, method=method)
    return {**(request_fields or {}), "uri": uri, "method": method}


def get(
    uri: str,
    request_fields: RequestConfig | Mapping[str, Any] | None = None,
    options: OptionsLike = None,
) -> Response | httpx.Response:
    """Send a GET request to ``uri``. See send()."""
    return send(_with_method("get", uri, request_fields), options)


def head(
    uri: str,
    request_fields: RequestConfig | Mapping[str, Any] | None = None,
    options: OptionsLike = None,
) -> Response | httpx.Response:
    """Send a HEAD request to ``uri``. See send()."""
    return send(_with_method("head", uri, request_fields), options)


def post(
    uri: str,
    request_fields: RequestConfig | Mapping[str, Any] | None = None,
    options: OptionsLike = None,
) -> Response | httpx.Response:
    """Send a POST request to ``uri``. See send()."""
    return send(_with_method("post", uri, request_fields), options)


def put(
    uri: str,
    request_fields: RequestConfig | Mapping[str, Any] | None = None,
    options: OptionsLike = None,
) -> Response | httpx.Response:
    """Send a PUT request to ``uri``. See send()."""
    return send(_with_method("put", uri, request_fields), options)


def delete(
    uri: str,
    request_fields: RequestConfig | Mapping[str, Any] | None = None,
    options: OptionsLike = None,
) -> Response | httpx.Response:
    """Send a DELETE request to ``uri``. See send()."""
    return send(_with_method("delete", uri, request_fields), options)
