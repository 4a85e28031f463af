# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
bevelnet package entrypoint.

Client-side channels for talking to a co-located service, either over a local
REST API or over a line-framed TCP socket. HTTP behavior is abstracted behind
an injectable WebClient interface whose calls return deferred results that can
be waited on or subscribed to.
"""

from .channels import (
    END_TOKEN,
    START_TOKEN,
    ChannelFactory,
    CommandChannel,
    CommandChannelFactory,
    FramedSocketChannel,
    LocalChannel,
    SocketChannelFactory,
)
from .config import ChannelSettings, ProxyConfig, load_channel_settings
from .deferred import Broadcast, DeferredSingle, DeferredStream
from .errors import (
    ChannelError,
    ConnectionClosedError,
    ErrorCategory,
    FramingError,
    HttpStatusError,
    NotConnectedError,
    ResponseFormatError,
)
from .http import (
    HttpRequest,
    HttpxWebClient,
    IsolatedHttpxWebClient,
    StubWebClient,
    WebClient,
    create_default_web_client,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "END_TOKEN",
    "START_TOKEN",
    "Broadcast",
    "ChannelError",
    "ChannelFactory",
    "ChannelSettings",
    "CommandChannel",
    "CommandChannelFactory",
    "ConnectionClosedError",
    "DeferredSingle",
    "DeferredStream",
    "ErrorCategory",
    "FramedSocketChannel",
    "FramingError",
    "HttpRequest",
    "HttpStatusError",
    "HttpxWebClient",
    "IsolatedHttpxWebClient",
    "LocalChannel",
    "NotConnectedError",
    "ProxyConfig",
    "ResponseFormatError",
    "SocketChannelFactory",
    "StubWebClient",
    "WebClient",
    "create_default_web_client",
    "load_channel_settings",
    "setup_logging",
    "__version__",
]
