"""Tests for configuration dataclasses."""

from dataclasses import FrozenInstanceError

import pytest

from httpmap import (
    BodyMode,
    ClientConfig,
    ConfigurationError,
    Redirect,
    RequestConfig,
    SendOptions,
    Version,
)


class TestClientConfig:
    """Tests for ClientConfig dataclass."""

    def test_default_values(self):
        """Every option is unset by default."""
        config = ClientConfig()

        assert config.connect_timeout is None
        assert config.cookie_handler is None
        assert config.executor is None
        assert config.follow_redirects is None
        assert config.priority is None
        assert config.proxy is None
        assert config.ssl_context is None
        assert config.ssl_parameters is None
        assert config.version is None
        assert config.transport is None
        assert config.verbose is False

    def test_enum_values_coerced(self):
        config = ClientConfig(follow_redirects="normal", version="http2")

        assert config.follow_redirects is Redirect.NORMAL
        assert config.version is Version.HTTP_2

    def test_from_mapping_declarative_keys(self):
        config = ClientConfig.from_mapping(
            {
                "connect-timeout": 2000,
                "follow-redirects": "always",
                "ssl-context": None,
                ":priority": 10,
            }
        )

        assert config.connect_timeout == 2000
        assert config.follow_redirects is Redirect.ALWAYS
        assert config.priority == 10

    def test_from_mapping_unknown_key(self):
        with pytest.raises(ConfigurationError, match="unrecognized ClientConfig option"):
            ClientConfig.from_mapping({"retries": 3})

    def test_validation_bad_redirect(self):
        with pytest.raises(ConfigurationError, match="follow-redirects"):
            ClientConfig(follow_redirects="sometimes")

    def test_validation_priority_range(self):
        with pytest.raises(ConfigurationError, match="priority must be between 1 and 256"):
            ClientConfig(priority=0)

        with pytest.raises(ConfigurationError):
            ClientConfig(priority=257)

    def test_validation_non_positive_timeout(self):
        with pytest.raises(ConfigurationError, match="connect-timeout must be > 0"):
            ClientConfig(connect_timeout=0)

    def test_frozen(self):
        config = ClientConfig()

        with pytest.raises(FrozenInstanceError):
            config.priority = 5


class TestRequestConfig:
    """Tests for RequestConfig dataclass."""

    def test_default_values(self):
        config = RequestConfig()

        assert config.uri is None
        assert config.method is None
        assert config.headers is None
        assert config.timeout is None
        assert config.version is None
        assert config.expect_continue is None
        assert config.body is None

    def test_from_mapping_declarative_keys(self):
        config = RequestConfig.from_mapping(
            {
                "uri": "https://example.com",
                "method": ":post",
                "expect-continue?": False,
                "version": "http1.1",
            }
        )

        assert config.uri == "https://example.com"
        assert config.method == ":post"
        assert config.expect_continue is False
        assert config.version is Version.HTTP_1_1

    def test_from_mapping_python_keys(self):
        config = RequestConfig.from_mapping({"uri": "https://example.com", "expect_continue": True})

        assert config.expect_continue is True

    def test_from_mapping_unknown_key(self):
        with pytest.raises(ConfigurationError, match="'params'"):
            RequestConfig.from_mapping({"uri": "https://example.com", "params": {}})

    def test_validation_header_values(self):
        RequestConfig(headers={"X-A": "1", "X-B": ["1", "2"], "X-C": ("3",)})

        with pytest.raises(ConfigurationError, match="header 'X-A'"):
            RequestConfig(headers={"X-A": 1})

        with pytest.raises(ConfigurationError):
            RequestConfig(headers={"X-A": ["1", 2]})

    def test_validation_bad_version(self):
        with pytest.raises(ConfigurationError):
            RequestConfig(version="http3")

    def test_validation_negative_timeout(self):
        with pytest.raises(ConfigurationError, match="timeout must be > 0"):
            RequestConfig(timeout=-5)


class TestSendOptions:
    """Tests for SendOptions dataclass."""

    def test_default_values(self):
        options = SendOptions()

        assert options.as_ is BodyMode.STRING
        assert options.client is None
        assert options.raw is False

    def test_none_mode_is_string(self):
        assert SendOptions(as_=None).as_ is BodyMode.STRING

    def test_from_mapping_declarative_keys(self):
        options = SendOptions.from_mapping({"as": "input-stream", "raw?": True})

        assert options.as_ is BodyMode.INPUT_STREAM
        assert options.raw is True

    def test_from_mapping_empty(self):
        assert SendOptions.from_mapping({}) == SendOptions()
        assert SendOptions.from_mapping(None) == SendOptions()

    def test_unrecognized_mode(self):
        with pytest.raises(ConfigurationError):
            SendOptions.from_mapping({"as": "json"})
