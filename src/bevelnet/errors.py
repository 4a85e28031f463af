# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception types."""

from __future__ import annotations

import socket
from enum import Enum

import httpx


class ChannelError(Exception):
    """Base class for every error raised by bevelnet channels and transports."""


class NotConnectedError(ChannelError):
    """An operation was attempted on a socket channel with no established connection."""


class ConnectionClosedError(ChannelError):
    """The peer closed the connection while a reply was expected."""


class FramingError(ChannelError, ValueError):
    """A payload cannot be carried by the line-framed socket protocol."""


class HttpStatusError(ChannelError):
    """The server answered with a status other than 200."""

    def __init__(self, url: str, status_code: int, body: str = ""):
        super().__init__(f"Failed to get response from {url} (status {status_code})")
        self.url = url
        self.status_code = status_code
        self.body = body


class ResponseFormatError(ChannelError):
    """A response body did not have the expected JSON shape."""


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    NOT_CONNECTED = "NOT_CONNECTED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def _exception_chain(exc: BaseException, limit: int = 8) -> list[BaseException]:
    # httpx wraps the OS error in its own exception types; walk the cause chain.
    chain: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and len(chain) < limit:
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map Python/httpx/channel exceptions to ErrorCategory.
    """
    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, NotConnectedError):
        return ErrorCategory.NOT_CONNECTED

    if isinstance(exc, (HttpStatusError, ResponseFormatError, FramingError, httpx.DecodingError)):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, (httpx.TimeoutException, socket.timeout, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if any(isinstance(link, socket.gaierror) for link in _exception_chain(exc)):
        return ErrorCategory.DNS_ERROR

    if isinstance(
        exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)
    ):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionClosedError, ConnectionError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Request timed out",
        ErrorCategory.CONNECTION_ERROR: "Connection partner unreachable",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.PROTOCOL_ERROR: "Unexpected response from connection partner",
        ErrorCategory.NOT_CONNECTED: "Socket connection not established",
        ErrorCategory.UNKNOWN_ERROR: "Communication error",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Communication error")


__all__ = [
    "ChannelError",
    "ConnectionClosedError",
    "ErrorCategory",
    "FramingError",
    "HttpStatusError",
    "NotConnectedError",
    "ResponseFormatError",
    "categorize_exception",
    "error_category_to_reason",
]
