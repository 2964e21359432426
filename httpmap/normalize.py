"""Conversion of transport responses into canonical Responses."""

from __future__ import annotations

from typing import Any

import httpx

from ._coerce import BodyMode, Version
from .body import ResponseStream
from .models import HeaderValue, Response


def collapse_headers(headers: httpx.Headers) -> dict[str, HeaderValue]:
    """Group headers by name, case-insensitively.

    Each name maps to its single value, or to the list of its values in the
    order received when it occurs more than once. The first spelling seen
    is used as the key.
    """
    names: dict[str, str] = {}
    grouped: dict[str, list[str]] = {}
    encoding = headers.encoding
    for raw_name, raw_value in headers.raw:
        name = raw_name.decode(encoding)
        key = names.setdefault(name.lower(), name)
        grouped.setdefault(key, []).append(raw_value.decode(encoding))
    return {
        name: values[0] if len(values) == 1 else values
        for name, values in grouped.items()
    }


def _body(response: httpx.Response, mode: BodyMode) -> Any:
    if mode is BodyMode.INPUT_STREAM:
        return ResponseStream(response)
    if mode is BodyMode.BYTE_ARRAY:
        return response.content
    return response.text


def to_canonical(response: httpx.Response, mode: BodyMode | str | None = None) -> Response:
    """Convert an ``httpx.Response`` into a canonical Response.

    Args:
        response: Transport response.
        mode: Body-handling mode the response was requested with.
              Defaults to "string".

    Returns:
        Response with status, body, version keyword and collapsed headers.
    """
    mode = BodyMode.coerce(mode)
    return Response(
        status=response.status_code,
        body=_body(response, mode),
        version=Version.keyword_for(response.http_version),
        headers=collapse_headers(response.headers),
    )
