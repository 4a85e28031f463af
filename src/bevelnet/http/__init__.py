# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .adapters import StubWebClient
from .client import WebClient, create_default_web_client
from .httpx_client import HttpxWebClient
from .isolated_client import IsolatedHttpxWebClient
from .models import (
    HttpRequest,
    build_structured_url,
    build_url,
    has_header,
    with_default_content_type,
)

__all__ = [
    "HttpRequest",
    "HttpxWebClient",
    "IsolatedHttpxWebClient",
    "StubWebClient",
    "WebClient",
    "build_structured_url",
    "build_url",
    "create_default_web_client",
    "has_header",
    "with_default_content_type",
]
