# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Channel exports."""

from .base import ChannelFactory, LocalChannel
from .command import CommandChannel
from .factory import CommandChannelFactory, SocketChannelFactory
from .framed import END_TOKEN, START_TOKEN, FramedSocketChannel, frame

__all__ = [
    "END_TOKEN",
    "START_TOKEN",
    "ChannelFactory",
    "CommandChannel",
    "CommandChannelFactory",
    "FramedSocketChannel",
    "LocalChannel",
    "SocketChannelFactory",
    "frame",
]
