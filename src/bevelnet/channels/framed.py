# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Line-framed TCP channel for local IPC.

Every message is written as three lines: ``START_TOKEN``, the payload, and
``END_TOKEN``. The peer answers a framed request with exactly one line. There
is no length prefix and no escaping, so payloads must not contain newlines.

The channel is synchronous and holds a single reader/writer pair; concurrent
callers must serialize access themselves.
"""

from __future__ import annotations

import logging
import socket
from contextlib import suppress
from typing import Any, TextIO

from ..codec import encode_message
from ..config import DEFAULT_HOST
from ..deferred import Broadcast
from ..errors import ConnectionClosedError, FramingError, NotConnectedError

logger = logging.getLogger(__name__)

START_TOKEN = "_!START_"
END_TOKEN = "_!END_"


def frame(message: str) -> list[str]:
    """Return the three wire lines for one message."""
    if "\n" in message or "\r" in message:
        raise FramingError("Framed payloads must be a single line")
    return [START_TOKEN, message, END_TOKEN]


class FramedSocketChannel:
    """
    Synchronous client for the framed line protocol.

    The constructor connects immediately. A failed connection is logged and
    leaves the channel degraded: :meth:`is_connected` is False and send
    operations raise :class:`NotConnectedError`.
    """

    def __init__(self, port: int, host: str = DEFAULT_HOST, *, connect_timeout: float | None = None):
        self.host = host
        self.connect_timeout = connect_timeout
        self.current_port: int | None = None
        self._socket: socket.socket | None = None
        self._reader: TextIO | None = None
        self._writer: TextIO | None = None
        # Inbound-message extension point; the request/response path does not publish here.
        self.messages: Broadcast[str] = Broadcast(description=f"socket-messages:{port}")
        self.connect(port)

    def connect(self, port: int) -> bool:
        """Open a connection to ``host:port``, discarding any previous one."""
        if self._socket is not None:
            self._disconnect()
        try:
            sock = socket.create_connection((self.host, port), timeout=self.connect_timeout)
            sock.settimeout(None)
        except OSError as exc:
            logger.warning("Error connecting to server on port %s: %s", port, exc)
            return False
        self._socket = sock
        self._reader = sock.makefile("r", encoding="utf-8", newline="\n")
        self._writer = sock.makefile("w", encoding="utf-8", newline="\n")
        self.current_port = port
        logger.info("Connected to server on port %s", port)
        return True

    def send_raw(self, message: str) -> None:
        """Write one line without framing."""
        if self._writer is None:
            raise NotConnectedError("Socket connection not established")
        self._writer.write(f"{message}\n")
        self._writer.flush()

    def receive_raw(self) -> str:
        """Block until one line arrives and return it without its terminator."""
        if self._reader is None:
            raise NotConnectedError("Socket connection not established")
        line = self._reader.readline()
        if not line:
            raise ConnectionClosedError(f"Connection to port {self.current_port} closed by peer")
        return line.rstrip("\r\n")

    def _send_framed(self, message: Any) -> None:
        payload = message if isinstance(message, str) else encode_message(message)
        lines = frame(payload)
        if self._writer is None:
            raise NotConnectedError("Socket connection not established")
        for line in lines:
            self.send_raw(line)

    def send(self, message: Any) -> str:
        """Send one framed message and return the single-line reply."""
        self._send_framed(message)
        return self.receive_raw()

    def send_without_response(self, message: Any) -> None:
        self._send_framed(message)

    def is_connected(self) -> bool:
        return self._socket is not None and self._socket.fileno() != -1

    def _disconnect(self) -> None:
        for resource in (self._reader, self._writer, self._socket):
            if resource is None:
                continue
            with suppress(OSError):
                resource.close()
        self._reader = None
        self._writer = None
        self._socket = None
        logger.info("Closed connection to server on port %s", self.current_port)

    def close(self) -> None:
        """Release the connection and complete every stream on :attr:`messages`."""
        self._disconnect()
        self.messages.complete()

    def __enter__(self) -> FramedSocketChannel:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["END_TOKEN", "FramedSocketChannel", "START_TOKEN", "frame"]
