"""Coercion of declarative option values into transport values."""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Any

from .models import ConfigurationError


def to_seconds(value: Any) -> Any:
    """Convert a timeout value to the transport's duration (float seconds).

    Integers are milliseconds and timedeltas are converted. Anything else
    (float seconds, an ``httpx.Timeout``) is passed through unchanged.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value / 1000.0
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


class _Keyword(Enum):
    """Enum addressable by member, keyword or wire name."""

    def __new__(cls, keyword: str, wire: str):
        member = object.__new__(cls)
        member._value_ = keyword
        member.wire = wire
        return member

    @classmethod
    def coerce(cls, value: Any, option: str) -> Any:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.lstrip(":")
            for member in cls:
                if text.lower() in (member.value, member.wire.lower(), member.name.lower()):
                    return member
        raise ConfigurationError(
            f"unrecognized option {option}={value!r}; "
            f"expected one of {', '.join(m.value for m in cls)}",
            option=option,
        )


class Redirect(_Keyword):
    """Redirect policy."""

    NEVER = ("never", "NEVER")
    ALWAYS = ("always", "ALWAYS")
    NORMAL = ("normal", "NORMAL")


class Version(_Keyword):
    """HTTP protocol version."""

    HTTP_1_1 = ("http1.1", "HTTP/1.1")
    HTTP_2 = ("http2", "HTTP/2")

    @classmethod
    def keyword_for(cls, wire: str) -> str:
        """Keyword for a transport version string, or the string itself."""
        for member in cls:
            if member.wire == wire:
                return member.value
        return wire


class BodyMode(_Keyword):
    """Representation of an incoming response body."""

    STRING = ("string", "text")
    BYTE_ARRAY = ("byte-array", "bytes")
    INPUT_STREAM = ("input-stream", "stream")

    @classmethod
    def coerce(cls, value: Any, option: str = "as") -> "BodyMode":
        if value is None:
            return cls.STRING
        return super().coerce(value, option)


def method_name(method: Any) -> str:
    """Upper-case HTTP method name for a keyword such as ``"get"`` or ``":post"``."""
    if isinstance(method, Enum):
        method = method.value
    return str(method).lstrip(":").upper()
