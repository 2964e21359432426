"""Debug/verbose mode for Client."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, TextIO


@dataclass
class DebugInfo:
    """Debug information for a request/response cycle."""

    # Request info
    timestamp: datetime
    method: str
    url: str

    # Transport info
    http_version: str = "auto"
    body_mode: str = "string"
    proxy_used: str | None = None

    # Request details
    request_headers: list[tuple[str, str]] = field(default_factory=list)

    # Response details (populated after request)
    final_url: str | None = None
    status_code: int | None = None
    response_version: str | None = None
    response_headers: list[tuple[str, str]] = field(default_factory=list)
    elapsed: float = 0.0

    # Error info
    error: str | None = None


class DebugOutput:
    """Handles verbose output formatting and dispatch."""

    def __init__(
        self,
        enabled: bool = False,
        output: TextIO | None = None,
        callback: Callable[[DebugInfo], None] | None = None,
    ):
        """Initialize debug output handler.

        Args:
            enabled: Whether verbose output is enabled.
            output: Output stream (defaults to stderr).
            callback: Optional callback for programmatic capture.
        """
        self.enabled = enabled
        self.output = output or sys.stderr
        self.callback = callback

    def log_request(self, info: DebugInfo) -> None:
        """Log debug info for a request/response cycle.

        Args:
            info: Debug information to log.
        """
        if not self.enabled:
            return

        if self.callback:
            self.callback(info)

        self._print_formatted(info)

    def _print_formatted(self, info: DebugInfo) -> None:
        out = self.output
        sep = "=" * 80

        out.write(f"\n{sep}\n")
        out.write(f"[{info.timestamp.strftime('%Y-%m-%d %H:%M:%S')}] ")
        out.write(f"{info.method} {info.url}\n")
        out.write(f"{sep}\n")

        parts = [f"HTTP: {info.http_version}", f"Body: {info.body_mode}"]
        if info.proxy_used:
            parts.append(f"Proxy: {self._mask_proxy_password(info.proxy_used)}")
        out.write(" | ".join(parts) + "\n")

        if info.request_headers:
            out.write("\n> Request Headers:\n")
            for name, value in info.request_headers:
                out.write(f"  {name}: {self._truncate(value, 80)}\n")

        out.write("\n" + "-" * 80 + "\n")

        if info.error:
            out.write(f"< ERROR: {info.error}\n")
        elif info.status_code is not None:
            out.write(f"< {info.response_version or 'HTTP'} {info.status_code}")
            if info.elapsed:
                out.write(f"  [{info.elapsed:.3f}s]")
            out.write("\n")

            if info.final_url and info.final_url != info.url:
                out.write(f"< Redirected to: {info.final_url}\n")

            if info.response_headers:
                out.write("\n< Response Headers:\n")
                for name, value in info.response_headers:
                    out.write(f"  {name}: {self._truncate(value, 80)}\n")

        out.write(f"{sep}\n")
        out.flush()

    @staticmethod
    def _truncate(value: str, limit: int) -> str:
        if len(value) > limit:
            return value[: limit - 3] + "..."
        return value

    def _mask_proxy_password(self, proxy_url: str) -> str:
        """Mask password in proxy URL for display.

        Args:
            proxy_url: Proxy URL that may contain credentials.

        Returns:
            URL with password masked.
        """
        if "@" not in proxy_url:
            return proxy_url

        if "://" in proxy_url:
            protocol, rest = proxy_url.split("://", 1)
        else:
            protocol, rest = "", proxy_url

        creds, host = rest.rsplit("@", 1)
        if ":" in creds:
            user, _ = creds.split(":", 1)
            creds = f"{user}:****"
        rest = f"{creds}@{host}"

        if protocol:
            return f"{protocol}://{rest}"
        return rest
