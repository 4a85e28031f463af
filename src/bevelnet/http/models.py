# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request model and request-construction rules shared by WebClient backends."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import httpx

Pairs = tuple[tuple[str, str], ...]

CONTENT_TYPE = "content-type"
JSON_CONTENT_TYPE = "application/json"


def as_pairs(items: Iterable[tuple[str, str]] | None) -> Pairs:
    """Freeze an iterable of (name, value) pairs, keeping order and duplicates."""
    if not items:
        return ()
    return tuple((str(name), str(value)) for name, value in items)


def has_header(headers: Iterable[tuple[str, str]], name: str) -> bool:
    lower = name.lower()
    return any(str(key).lower() == lower for key, _ in headers)


def with_default_content_type(headers: Iterable[tuple[str, str]] | None) -> Pairs:
    """Append ``content-type: application/json`` unless a content-type header is already present."""
    pairs = as_pairs(headers)
    if has_header(pairs, CONTENT_TYPE):
        return pairs
    return pairs + ((CONTENT_TYPE, JSON_CONTENT_TYPE),)


def build_url(url: str, query_parameters: Iterable[tuple[str, str]] | None) -> str:
    """Append ``key=value`` pairs joined by ``&`` to the URL."""
    params = as_pairs(query_parameters)
    if not params:
        return url
    query = "&".join(f"{key}={value}" for key, value in params)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def build_structured_url(url: str, query_parameters: Iterable[tuple[str, str]] | None) -> str:
    """Add query parameters through httpx's query builder (values are percent-encoded)."""
    params = as_pairs(query_parameters)
    if not params:
        return url
    parsed = httpx.URL(url)
    merged = httpx.QueryParams(list(parsed.params.multi_items()) + list(params))
    return str(parsed.copy_with(params=merged))


@dataclass(frozen=True)
class HttpRequest:
    """Immutable request description consumed by WebClient backends."""

    url: str
    method: str = "GET"
    body: str | None = None
    headers: Pairs = ()
    query_parameters: Pairs = ()

    @classmethod
    def create(
        cls,
        method: str,
        url: str,
        *,
        body: str | None = None,
        headers: Iterable[tuple[str, str]] | None = None,
        query_parameters: Iterable[tuple[str, str]] | None = None,
    ) -> HttpRequest:
        """Normalize inputs and apply the content-type default."""
        return cls(
            url=url,
            method=method.upper(),
            body=body,
            headers=with_default_content_type(headers),
            query_parameters=as_pairs(query_parameters),
        )

    @property
    def full_url(self) -> str:
        return build_url(self.url, self.query_parameters)

    @property
    def structured_url(self) -> str:
        return build_structured_url(self.url, self.query_parameters)

    def content(self) -> bytes | None:
        return self.body.encode("utf-8") if self.body is not None else None


__all__ = [
    "CONTENT_TYPE",
    "HttpRequest",
    "JSON_CONTENT_TYPE",
    "Pairs",
    "as_pairs",
    "build_structured_url",
    "build_url",
    "has_header",
    "with_default_content_type",
]
