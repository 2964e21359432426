"""Tests for duration and enum coercion."""

from datetime import timedelta

import httpx
import pytest

from httpmap import BodyMode, ConfigurationError, Redirect, Version, to_seconds
from httpmap._coerce import method_name


class TestToSeconds:
    """Tests for the duration normalizer."""

    def test_int_is_milliseconds(self):
        assert to_seconds(1500) == 1.5
        assert to_seconds(0) == 0.0

    def test_timedelta(self):
        assert to_seconds(timedelta(seconds=2, milliseconds=250)) == 2.25

    def test_float_passes_through(self):
        assert to_seconds(2.5) == 2.5

    def test_timeout_object_passes_through(self):
        timeout = httpx.Timeout(3.0)
        assert to_seconds(timeout) is timeout

    def test_bool_is_not_milliseconds(self):
        assert to_seconds(True) is True


class TestRedirect:
    """Tests for redirect policy mapping."""

    @pytest.mark.parametrize(
        "keyword, expected",
        [("never", Redirect.NEVER), ("always", Redirect.ALWAYS), ("normal", Redirect.NORMAL)],
    )
    def test_keywords(self, keyword, expected):
        assert Redirect.coerce(keyword, "follow-redirects") is expected

    def test_accepts_member_and_wire_name(self):
        assert Redirect.coerce(Redirect.NORMAL, "follow-redirects") is Redirect.NORMAL
        assert Redirect.coerce("ALWAYS", "follow-redirects") is Redirect.ALWAYS
        assert Redirect.coerce(":never", "follow-redirects") is Redirect.NEVER

    def test_unrecognized(self):
        with pytest.raises(ConfigurationError, match="unrecognized option") as exc_info:
            Redirect.coerce("sometimes", "follow-redirects")

        assert exc_info.value.option == "follow-redirects"

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            Redirect.coerce(3, "follow-redirects")


class TestVersion:
    """Tests for protocol version mapping."""

    def test_keywords(self):
        assert Version.coerce("http1.1", "version") is Version.HTTP_1_1
        assert Version.coerce("http2", "version") is Version.HTTP_2

    def test_wire_names(self):
        assert Version.HTTP_1_1.wire == "HTTP/1.1"
        assert Version.HTTP_2.wire == "HTTP/2"
        assert Version.coerce("HTTP/2", "version") is Version.HTTP_2

    def test_unrecognized(self):
        with pytest.raises(ConfigurationError, match="http1.1, http2"):
            Version.coerce("http3", "version")

    def test_keyword_for_transport_version(self):
        assert Version.keyword_for("HTTP/1.1") == "http1.1"
        assert Version.keyword_for("HTTP/2") == "http2"
        assert Version.keyword_for("HTTP/1.0") == "HTTP/1.0"


class TestBodyMode:
    """Tests for body-handling modes."""

    def test_default_is_string(self):
        assert BodyMode.coerce(None) is BodyMode.STRING

    def test_keywords(self):
        assert BodyMode.coerce("string") is BodyMode.STRING
        assert BodyMode.coerce("byte-array") is BodyMode.BYTE_ARRAY
        assert BodyMode.coerce("input-stream") is BodyMode.INPUT_STREAM

    def test_unrecognized(self):
        with pytest.raises(ConfigurationError) as exc_info:
            BodyMode.coerce("json")

        assert exc_info.value.option == "as"


class TestMethodName:
    """Tests for method keyword upper-casing."""

    @pytest.mark.parametrize(
        "method, expected",
        [("get", "GET"), (":post", "POST"), ("PaTcH", "PATCH"), ("propfind", "PROPFIND")],
    )
    def test_upper_cases_any_keyword(self, method, expected):
        assert method_name(method) == expected
