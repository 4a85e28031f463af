# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Deferred channel construction."""

from __future__ import annotations

from ..config import DEFAULT_HOST
from ..http.client import WebClient
from .base import ChannelFactory
from .command import CommandChannel
from .framed import FramedSocketChannel


class CommandChannelFactory(ChannelFactory[CommandChannel]):
    def __init__(self, web_client: WebClient, port: int | str, host: str = DEFAULT_HOST):
        self.web_client = web_client
        self.port = port
        self.host = host

    def create(self) -> CommandChannel:
        return CommandChannel(self.web_client, self.port, host=self.host)


class SocketChannelFactory(ChannelFactory[FramedSocketChannel]):
    """Builds a new (connected) socket channel on every ``create`` call."""

    def __init__(self, port: int, host: str = DEFAULT_HOST, connect_timeout: float | None = None):
        self.port = port
        self.host = host
        self.connect_timeout = connect_timeout

    def create(self) -> FramedSocketChannel:
        return FramedSocketChannel(self.port, self.host, connect_timeout=self.connect_timeout)
