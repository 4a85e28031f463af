# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process WebClient implementations."""

from __future__ import annotations

from collections.abc import Iterable

from ..deferred import DeferredSingle
from ..errors import ChannelError
from .client import WebClient
from .models import HttpRequest


class StubWebClient(WebClient):
    """Deterministic, programmable WebClient for tests and offline runs.

    Responses are keyed by URL (without query string). A string resolves the
    call with that body; an exception fails it.
    """

    def __init__(self, responses: dict[str, str | BaseException] | None = None):
        self._responses = dict(responses or {})
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: str | BaseException) -> None:
        self._responses[url] = response

    def _respond(self, request: HttpRequest) -> DeferredSingle[str]:
        self.requests.append(request)
        response = self._responses.get(request.url)
        if response is None:
            return DeferredSingle.failed(ChannelError(f"No stubbed response configured for {request.url}"))
        if isinstance(response, BaseException):
            return DeferredSingle.failed(response)
        return DeferredSingle.of(response)

    def send_post(
        self,
        url: str,
        body: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]:
        return self._respond(
            HttpRequest.create("POST", url, body=body, headers=headers, query_parameters=query_parameters)
        )

    def send_get(
        self,
        url: str,
        headers: Iterable[tuple[str, str]] = (),
        query_parameters: Iterable[tuple[str, str]] = (),
    ) -> DeferredSingle[str]:
        return self._respond(HttpRequest.create("GET", url, headers=headers, query_parameters=query_parameters))

    def close(self) -> None:
        self.closed = True
