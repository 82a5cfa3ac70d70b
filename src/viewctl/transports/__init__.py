"""Transport adapters — stdio lines and HTTP bodies around one dispatcher."""

from viewctl.transports.http import HttpTransport, status_for
from viewctl.transports.stdio import StdioTransport, stdin_lines

__all__ = [
    "HttpTransport",
    "StdioTransport",
    "status_for",
    "stdin_lines",
]
