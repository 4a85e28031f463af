# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""WebClient abstraction and factory."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from ..config import ChannelSettings, load_channel_settings
from ..deferred import DeferredSingle


class WebClient(Protocol):
    """
    Minimal protocol for issuing POST/GET requests that resolve to the response body.

    Backends implement the non-blocking ``send_post``/``send_get``; the blocking
    variants defined here wait for the deferred result and collapse any failure
    to an empty string (the failure is logged by the deferred result).
    """

    def send_post(
        self,
        url: str,
        body: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]: ...

    def send_get(
        self,
        url: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]: ...

    def send_post_blocking(
        self,
        url: str,
        body: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> str:
        return self.send_post(url, body, headers, query_parameters).await_blocking() or ""

    def send_get_blocking(
        self,
        url: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> str:
        return self.send_get(url, headers, query_parameters).await_blocking() or ""

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_web_client(settings: ChannelSettings | None = None) -> WebClient:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HttpxWebClient

    return HttpxWebClient(settings or load_channel_settings())
