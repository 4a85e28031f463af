# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed WebClient sharing one client handle across calls."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

import httpx

from ..config import ChannelSettings, ProxyConfig
from ..deferred import DeferredSingle, SingleSink
from ..errors import HttpStatusError, categorize_exception
from .client import WebClient
from .models import HttpRequest

logger = logging.getLogger(__name__)


def request_text(
    client: httpx.Client,
    request: HttpRequest,
    url: str | httpx.URL,
    timeout: float,
) -> tuple[int, str]:
    """
    Send ``request`` and return ``(status_code, body_text)``.

    httpx applies ``timeout`` to each connect/read/write phase on its own, so
    a peer trickling bytes could hold the call open indefinitely. The body is
    streamed against an overall deadline and ``httpx.ReadTimeout`` is raised
    once it passes.
    """
    deadline = time.monotonic() + timeout
    with client.stream(
        request.method,
        url,
        headers=list(request.headers),
        content=request.content(),
        timeout=timeout,
    ) as response:
        chunks: list[bytes] = []
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise httpx.ReadTimeout(
                    f"{request.method} {request.url} exceeded {timeout} seconds",
                    request=response.request,
                )
        body = b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")
        return response.status_code, body


class HttpxWebClient(WebClient):
    """
    WebClient over a single long-lived ``httpx.Client``.

    The client handle and proxy are fixed at construction and only read
    afterwards, so one instance may serve concurrent calls.
    """

    def __init__(
        self,
        settings: ChannelSettings | None = None,
        client: httpx.Client | None = None,
        *,
        proxy: ProxyConfig | None = None,
    ):
        self.settings = settings or ChannelSettings()
        self.proxy = proxy if proxy is not None else self.settings.proxy
        self._client = client or httpx.Client(
            timeout=self.settings.timeout,
            proxy=self.proxy.url if self.proxy else None,
            # Proxy routing comes only from the explicit ProxyConfig.
            trust_env=False,
        )

    def send_post(
        self,
        url: str,
        body: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]:
        request = HttpRequest.create("POST", url, body=body, headers=headers, query_parameters=query_parameters)
        return self._deferred(request)

    def send_get(
        self,
        url: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]:
        request = HttpRequest.create("GET", url, headers=headers, query_parameters=query_parameters)
        return self._deferred(request)

    def _deferred(self, request: HttpRequest) -> DeferredSingle[str]:
        def source(sink: SingleSink[str]) -> None:
            self._execute(request, sink)

        return DeferredSingle(source, description=f"{request.method} {request.url}")

    def _execute(self, request: HttpRequest, sink: SingleSink[str]) -> None:
        try:
            status_code, body = request_text(self._client, request, request.full_url, self.settings.timeout)
        except Exception as exc:  # noqa: BLE001
            logger.error("%s %s failed (%s): %s", request.method, request.url, categorize_exception(exc).value, exc)
            sink.error(exc)
            return

        if status_code == 200:
            sink.success(body)
        else:
            logger.error("%s %s", status_code, body)
            sink.error(HttpStatusError(request.url, status_code, body))

    def close(self) -> None:
        self._client.close()
