"""Request body strategies and the response body stream."""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Union

import httpx

from .models import ConfigurationError

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class TextBody:
    """Body sent as UTF-8 encoded text."""

    text: str

    def content(self) -> bytes:
        return self.text.encode("utf-8")


@dataclass(frozen=True)
class BytesBody:
    """Body sent as a raw byte sequence."""

    data: bytes

    def content(self) -> bytes:
        return self.data


@dataclass(frozen=True, eq=False)
class StreamBody:
    """Body drained from a streaming source.

    The source is read once. Sending the same request again after the
    source is exhausted sends whatever is left, usually nothing.
    """

    source: Any
    chunk_size: int = CHUNK_SIZE

    def content(self) -> Iterator[bytes]:
        read = getattr(self.source, "read", None)
        if read is not None:
            return iter(lambda: read(self.chunk_size), b"")
        return iter(self.source)


Body = Union[TextBody, BytesBody, StreamBody]


def encode_body(value: Any) -> Body | None:
    """Select the body strategy matching the shape of ``value``.

    Args:
        value: str, bytes-like, readable binary stream, iterable of bytes,
               an existing body strategy, or None.

    Returns:
        The body strategy, or None when there is no body.

    Raises:
        ConfigurationError: If the value has none of the supported shapes.
    """
    if value is None:
        return None
    if isinstance(value, (TextBody, BytesBody, StreamBody)):
        return value
    if isinstance(value, str):
        return TextBody(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BytesBody(bytes(value))
    if hasattr(value, "read") or isinstance(value, Iterable):
        return StreamBody(value)
    raise ConfigurationError(
        f"unsupported body type: {type(value).__name__}", option="body"
    )


class ResponseStream(io.RawIOBase):
    """Readable binary stream over a streaming ``httpx.Response``.

    Closing the stream closes the response and releases its connection.
    """

    def __init__(self, response: httpx.Response):
        super().__init__()
        self._response = response
        self._chunks: Iterator[bytes] | None = None
        self._pending = b""

    @property
    def response(self) -> httpx.Response:
        return self._response

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResponseStream):
            return other._response is self._response
        return NotImplemented

    def __hash__(self) -> int:
        return id(self._response)

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if self._chunks is None:
            self._chunks = self._response.iter_bytes()
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()
