# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed WebClient that opens a fresh client for every call."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import httpx

from ..codec import extract_message_content
from ..config import ChannelSettings
from ..deferred import DeferredSingle, SingleSink
from ..errors import HttpStatusError, ResponseFormatError, categorize_exception
from .client import WebClient
from .httpx_client import request_text
from .models import HttpRequest

logger = logging.getLogger(__name__)


class IsolatedHttpxWebClient(WebClient):
    """
    WebClient that builds a new ``httpx.Client`` per request and closes it afterwards.

    No client state is shared between calls. Query parameters go through
    httpx's structured query builder. GET responses in chat-completion format
    can be unwrapped with :meth:`send_get_content`.
    """

    def __init__(
        self,
        settings: ChannelSettings | None = None,
        client_factory: Callable[[], httpx.Client] | None = None,
    ):
        self.settings = settings or ChannelSettings()
        self._client_factory = client_factory or self._default_client

    def _default_client(self) -> httpx.Client:
        return httpx.Client(timeout=self.settings.timeout, trust_env=False)

    def send_post(
        self,
        url: str,
        body: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]:
        request = HttpRequest.create("POST", url, body=body, headers=headers, query_parameters=query_parameters)
        return self._deferred(request, extract_content=False)

    def send_get(
        self,
        url: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]:
        request = HttpRequest.create("GET", url, headers=headers, query_parameters=query_parameters)
        return self._deferred(request, extract_content=False)

    def send_get_content(
        self,
        url: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]:
        """GET and resolve with ``choices[0].message.content``; fails when the body lacks that shape."""
        request = HttpRequest.create("GET", url, headers=headers, query_parameters=query_parameters)
        return self._deferred(request, extract_content=True)

    def send_get_content_blocking(
        self,
        url: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> str:
        return self.send_get_content(url, headers, query_parameters).await_blocking() or ""

    def _deferred(self, request: HttpRequest, *, extract_content: bool) -> DeferredSingle[str]:
        def source(sink: SingleSink[str]) -> None:
            self._execute(request, sink, extract_content)

        return DeferredSingle(source, description=f"{request.method} {request.url}")

    def _execute(self, request: HttpRequest, sink: SingleSink[str], extract_content: bool) -> None:
        try:
            with self._client_factory() as client:
                status_code, body = request_text(client, request, request.structured_url, self.settings.timeout)
        except Exception as exc:  # noqa: BLE001
            logger.error("%s %s failed (%s): %s", request.method, request.url, categorize_exception(exc).value, exc)
            sink.error(exc)
            return

        if status_code != 200:
            logger.error("%s %s", status_code, body)
            sink.error(HttpStatusError(request.url, status_code, body))
            return

        if not extract_content:
            sink.success(body)
            return

        try:
            sink.success(extract_message_content(body))
        except ResponseFormatError as exc:
            logger.warning("Failed to parse response content from %s: %s", request.url, exc)
            sink.error(exc)

    def close(self) -> None:
        return None
