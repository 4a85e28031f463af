# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Channel contracts shared by the REST and socket implementations."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

ChannelT = TypeVar("ChannelT", bound="LocalChannel", covariant=True)


class LocalChannel(Protocol):
    """A bound handle to one local destination."""

    def send(self, message: Any) -> str: ...

    def send_without_response(self, message: str) -> None: ...

    def is_connected(self) -> bool: ...

    def close(self) -> None: ...


class ChannelFactory(Protocol[ChannelT]):
    """Holds channel configuration and builds a channel on demand."""

    def create(self) -> ChannelT: ...
