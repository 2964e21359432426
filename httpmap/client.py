"""Client construction and the process-wide default client."""

from __future__ import annotations

import logging
import ssl
import threading
import time
from collections.abc import Mapping
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import Any

import httpx

from ._coerce import BodyMode, Redirect, Version, to_seconds
from ._debug import DebugInfo, DebugOutput
from .config import ClientConfig, SSLParameters
from .models import ConfigurationError, HTTPTimeoutError, Request, TransportError

logger = logging.getLogger(__name__)


class ClientBuilder:
    """Collects client options and builds an immutable Client.

    Only options that were explicitly set are applied to the transport;
    everything else keeps the transport's default.

    Examples:
        client = (
            ClientBuilder()
            .connect_timeout(2000)
            .follow_redirects("normal")
            .build()
        )
    """

    def __init__(self) -> None:
        self._overrides: dict[str, Any] = {}
        self._debug: DebugOutput | None = None

    @property
    def overrides(self) -> dict[str, Any]:
        """Options set so far, keyed by option name."""
        return dict(self._overrides)

    def connect_timeout(self, value: Any) -> "ClientBuilder":
        """Connection timeout, int milliseconds or a duration."""
        self._overrides["connect_timeout"] = to_seconds(value)
        return self

    def cookie_handler(self, cookies: Any) -> "ClientBuilder":
        self._overrides["cookie_handler"] = cookies
        return self

    def executor(self, executor: Executor) -> "ClientBuilder":
        self._overrides["executor"] = executor
        return self

    def follow_redirects(self, policy: Redirect | str) -> "ClientBuilder":
        self._overrides["follow_redirects"] = Redirect.coerce(policy, "follow-redirects")
        return self

    def priority(self, priority: int) -> "ClientBuilder":
        if not 1 <= priority <= 256:
            raise ConfigurationError("priority must be between 1 and 256", option="priority")
        self._overrides["priority"] = priority
        return self

    def proxy(self, proxy: Any) -> "ClientBuilder":
        self._overrides["proxy"] = proxy
        return self

    def ssl_context(self, context: ssl.SSLContext) -> "ClientBuilder":
        self._overrides["ssl_context"] = context
        return self

    def ssl_parameters(self, parameters: SSLParameters) -> "ClientBuilder":
        self._overrides["ssl_parameters"] = parameters
        return self

    def version(self, version: Version | str) -> "ClientBuilder":
        self._overrides["version"] = Version.coerce(version, "version")
        return self

    def transport(self, transport: httpx.BaseTransport) -> "ClientBuilder":
        self._overrides["transport"] = transport
        return self

    def debug(self, output: DebugOutput) -> "ClientBuilder":
        self._debug = output
        return self

    def build(self) -> "Client":
        return Client(self._overrides, debug=self._debug)


def _apply_ssl_parameters(context: ssl.SSLContext, parameters: SSLParameters) -> None:
    if parameters.protocols:
        versions = sorted(parameters.protocols)
        context.minimum_version = versions[0]
        context.maximum_version = versions[-1]
    if parameters.ciphers:
        context.set_ciphers(parameters.ciphers)
    if parameters.alpn_protocols:
        context.set_alpn_protocols(list(parameters.alpn_protocols))


def _version_flags(version: Version | None) -> dict[str, bool]:
    if version is Version.HTTP_1_1:
        return {"http1": True, "http2": False}
    if version is Version.HTTP_2:
        return {"http2": True}
    return {}


def _is_downgrade(response: httpx.Response) -> bool:
    next_request = response.next_request
    return (
        next_request is not None
        and response.request.url.scheme == "https"
        and next_request.url.scheme == "http"
    )


class Client:
    """Immutable, reusable handle to a configured httpx transport.

    Safe to share between threads and concurrent requests. Requests that
    ask for a protocol version other than the client's are routed through
    a sibling transport client created on first use.
    """

    def __init__(
        self,
        overrides: Mapping[str, Any] | None = None,
        debug: DebugOutput | None = None,
    ):
        self._overrides = dict(overrides or {})
        self._debug = debug or DebugOutput(enabled=False)
        self._lock = threading.Lock()
        self._variants: dict[Version, httpx.Client] = {}
        self._closed = False
        self._tls = self._tls_context()
        self._http = self._open(self.version)
        logger.debug("Built client with options %s", sorted(self._overrides))

    def _tls_context(self) -> ssl.SSLContext | None:
        """SSL context for every transport client, created once."""
        options = self._overrides
        if "ssl_parameters" not in options:
            return options.get("ssl_context")
        if "ssl_context" in options:
            raise ConfigurationError(
                "ssl-parameters cannot be combined with ssl-context; "
                "configure the supplied context directly",
                option="ssl-parameters",
            )
        context = httpx.create_ssl_context()
        _apply_ssl_parameters(context, options["ssl_parameters"])
        return context

    def _transport_options(self) -> dict[str, Any]:
        """httpx.Client keyword arguments for the options that were set."""
        options = self._overrides
        kwargs: dict[str, Any] = {}
        if "cookie_handler" in options:
            kwargs["cookies"] = options["cookie_handler"]
        if "follow_redirects" in options:
            kwargs["follow_redirects"] = options["follow_redirects"] is Redirect.ALWAYS
        if "proxy" in options:
            kwargs["proxy"] = options["proxy"]
        if self._tls is not None:
            kwargs["verify"] = self._tls
        if "transport" in options:
            kwargs["transport"] = options["transport"]
        return kwargs

    def _open(self, version: Version | None) -> httpx.Client:
        http = httpx.Client(**self._transport_options(), **_version_flags(version))
        if "connect_timeout" in self._overrides:
            connect = self._overrides["connect_timeout"]
            if isinstance(connect, httpx.Timeout):
                connect = connect.connect
            current = http.timeout
            http.timeout = httpx.Timeout(
                connect=connect,
                read=current.read,
                write=current.write,
                pool=current.pool,
            )
        return http

    def _http_for(self, version: Version | None) -> httpx.Client:
        if version is None or version is self.version:
            return self._http
        with self._lock:
            if version not in self._variants:
                self._variants[version] = self._open(version)
            return self._variants[version]

    # ========== Configuration ==========

    @property
    def overrides(self) -> dict[str, Any]:
        """Options applied to this client, keyed by option name."""
        return dict(self._overrides)

    @property
    def connect_timeout(self) -> float | None:
        return self._http.timeout.connect

    @property
    def cookie_handler(self) -> Any:
        return self._overrides.get("cookie_handler")

    @property
    def executor(self) -> Executor | None:
        return self._overrides.get("executor")

    @property
    def follow_redirects(self) -> Redirect:
        return self._overrides.get("follow_redirects", Redirect.NEVER)

    @property
    def priority(self) -> int | None:
        return self._overrides.get("priority")

    @property
    def proxy(self) -> Any:
        return self._overrides.get("proxy")

    @property
    def version(self) -> Version | None:
        return self._overrides.get("version")

    @property
    def http(self) -> httpx.Client:
        """The underlying httpx client."""
        return self._http

    # ========== Sending ==========

    def build_request(self, request: Request) -> httpx.Request:
        """Translate a built Request into a transport request."""
        http = self._http_for(request.version)
        kwargs: dict[str, Any] = {"headers": list(request.headers)}
        if request.body is not None:
            kwargs["content"] = request.body.content()
        if request.timeout is not None:
            kwargs["timeout"] = request.timeout
        return http.build_request(request.method, request.uri, **kwargs)

    def send(
        self,
        request: Request | httpx.Request,
        mode: BodyMode = BodyMode.STRING,
    ) -> httpx.Response:
        """Send a request and block until the response arrives.

        Args:
            request: Built Request or a pre-built ``httpx.Request``.
            mode: Body-handling mode. In "input-stream" mode the body is
                  left unread and must be consumed or closed by the caller.

        Returns:
            The transport response.

        Raises:
            HTTPTimeoutError: If the request timeout elapsed.
            TransportError: On connection, protocol or TLS errors.
        """
        if self._closed:
            raise TransportError("Client is closed")

        if isinstance(request, Request):
            http = self._http_for(request.version)
            outgoing = self.build_request(request)
        else:
            http = self._http
            outgoing = request

        stream = mode is BodyMode.INPUT_STREAM
        logger.debug("Sending %s %s (as %s)", outgoing.method, outgoing.url, mode.value)
        started = time.monotonic()
        try:
            response = self._dispatch(http, outgoing, stream)
        except httpx.TimeoutException as e:
            self._trace(outgoing, mode, error=repr(e), elapsed=time.monotonic() - started)
            raise HTTPTimeoutError(str(e) or "request timed out", original_error=e) from e
        except httpx.HTTPError as e:
            self._trace(outgoing, mode, error=repr(e), elapsed=time.monotonic() - started)
            raise TransportError(str(e), original_error=e) from e

        elapsed = time.monotonic() - started
        logger.debug(
            "Received %s from %s %s in %.3fs",
            response.status_code, outgoing.method, outgoing.url, elapsed,
        )
        self._trace(outgoing, mode, response=response, elapsed=elapsed)
        return response

    def submit(
        self,
        request: Request | httpx.Request,
        mode: BodyMode = BodyMode.STRING,
    ) -> Future:
        """Send a request on the client's executor without blocking."""
        executor = self.executor or _default_executor()
        return executor.submit(self.send, request, mode)

    def _dispatch(
        self,
        http: httpx.Client,
        request: httpx.Request,
        stream: bool,
    ) -> httpx.Response:
        response = http.send(request, stream=stream)
        if self.follow_redirects is not Redirect.NORMAL:
            return response

        # Follow every hop except https -> http.
        history: list[httpx.Response] = []
        while response.next_request is not None and not _is_downgrade(response):
            if len(history) >= http.max_redirects:
                response.close()
                raise httpx.TooManyRedirects(
                    "Exceeded maximum allowed redirects.", request=response.request
                )
            response.read()
            history.append(response)
            response = http.send(response.next_request, stream=stream)
        response.history = history
        return response

    def _trace(
        self,
        request: httpx.Request,
        mode: BodyMode,
        response: httpx.Response | None = None,
        error: str | None = None,
        elapsed: float = 0.0,
    ) -> None:
        if not self._debug.enabled:
            return
        version = self.version
        proxy = self.proxy
        info = DebugInfo(
            timestamp=datetime.now(),
            method=request.method,
            url=str(request.url),
            http_version=version.wire if version else "auto",
            body_mode=mode.value,
            proxy_used=str(proxy) if proxy else None,
            request_headers=request.headers.multi_items(),
            elapsed=elapsed,
            error=error,
        )
        if response is not None:
            info.final_url = str(response.url)
            info.status_code = response.status_code
            info.response_version = response.http_version
            info.response_headers = response.headers.multi_items()
        self._debug.log_request(info)

    # ========== Context Managers ==========

    def close(self) -> None:
        """Close client and release pooled connections."""
        if not self._closed:
            self._http.close()
            with self._lock:
                for http in self._variants.values():
                    http.close()
                self._variants.clear()
            self._closed = True

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def _client_config(config: ClientConfig | Mapping[str, Any] | None, options: dict) -> ClientConfig:
    if isinstance(config, ClientConfig):
        return replace(config, **options) if options else config
    return ClientConfig.from_mapping({**(config or {}), **options})


def client_builder(
    config: ClientConfig | Mapping[str, Any] | None = None,
    **options: Any,
) -> ClientBuilder:
    """Same as make_client(), but returns the ClientBuilder instead of the Client.

    Args:
        config: ClientConfig or a declarative option map
                ({"connect-timeout": 2000, "follow-redirects": "normal"}).
        **options: ClientConfig fields, applied over ``config``.

    Raises:
        ConfigurationError: On unrecognized options or option values.
    """
    config = _client_config(config, options)
    builder = ClientBuilder()
    if config.connect_timeout is not None:
        builder.connect_timeout(config.connect_timeout)
    if config.cookie_handler is not None:
        builder.cookie_handler(config.cookie_handler)
    if config.executor is not None:
        builder.executor(config.executor)
    if config.follow_redirects is not None:
        builder.follow_redirects(config.follow_redirects)
    if config.priority is not None:
        builder.priority(config.priority)
    if config.proxy is not None:
        builder.proxy(config.proxy)
    if config.ssl_context is not None:
        builder.ssl_context(config.ssl_context)
    if config.ssl_parameters is not None:
        builder.ssl_parameters(config.ssl_parameters)
    if config.version is not None:
        builder.version(config.version)
    if config.transport is not None:
        builder.transport(config.transport)
    if config.verbose:
        builder.debug(
            DebugOutput(
                enabled=True,
                output=config.debug_output,
                callback=config.debug_callback,
            )
        )
    return builder


def make_client(
    config: ClientConfig | Mapping[str, Any] | None = None,
    **options: Any,
) -> Client:
    """Build a Client. Options that are not given keep the transport default.

    Examples:
        client = make_client()
        client = make_client({"follow-redirects": "normal", "version": "http2"})
        client = make_client(connect_timeout=2000, proxy="http://proxy:8080")
    """
    return client_builder(config, **options).build()


# Shared executor for asynchronous sends on clients without one
_shared_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def _default_executor() -> ThreadPoolExecutor:
    global _shared_executor
    if _shared_executor is None:
        with _executor_lock:
            if _shared_executor is None:
                _shared_executor = ThreadPoolExecutor(thread_name_prefix="httpmap")
    return _shared_executor


class _DefaultClient:
    """Holder for the process-wide default client, built once on first use."""

    def __init__(self) -> None:
        self._client: Client | None = None
        self._owned = False
        self._lock = threading.Lock()

    def get(self) -> Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = make_client()
                    self._owned = True
        return self._client

    def set(self, client: Client | None) -> None:
        """Install ``client``; a replaced client built by the holder is closed."""
        with self._lock:
            previous, owned = self._client, self._owned
            self._client, self._owned = client, False
        if owned and previous is not None and previous is not client:
            previous.close()


_default = _DefaultClient()


def default_client() -> Client:
    """Client used for requests unless one is passed explicitly."""
    return _default.get()


def set_default_client(client: Client) -> None:
    """Replace the process-wide default client (mainly for tests).

    The caller keeps ownership of ``client`` and closes it. A default
    client built on first use is closed when it is replaced.
    """
    _default.set(client)


def reset_default_client() -> None:
    """Forget the default client; the next use builds a fresh one.

    A default client built on first use is closed.
    """
    _default.set(None)
