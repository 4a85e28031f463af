# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for bevelnet.

Settings are resolved once by the process entry point and handed to transports
explicitly; nothing below the entry point reads the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlsplit

DEFAULT_TIMEOUT = 600.0
DEFAULT_HOST = "localhost"

_DEFAULT_PORTS = {"https": 443, "http": 80}


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _optional_float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = float(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass(frozen=True)
class ProxyConfig:
    """Outbound proxy address (host + port)."""

    host: str
    port: int

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_url(cls, url: str | None) -> ProxyConfig | None:
        """Parse a proxy URL such as ``http://proxy.local:3128``; ``None`` when unset or hostless."""
        raw = str(url or "").strip()
        if not raw:
            return None
        if "://" not in raw:
            raw = f"http://{raw}"
        try:
            parts = urlsplit(raw)
            port = parts.port
        except ValueError:
            return None
        if not parts.hostname:
            return None
        if port is None:
            port = _DEFAULT_PORTS.get(parts.scheme.lower(), 80)
        return cls(host=parts.hostname, port=port)


@dataclass
class ChannelSettings:
    """Channel and HTTP transport defaults."""

    timeout: float = DEFAULT_TIMEOUT
    host: str = DEFAULT_HOST
    connect_timeout: float | None = None
    proxy: ProxyConfig | None = None

    @classmethod
    def from_env(cls) -> ChannelSettings:
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("BEVELNET_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        proxy_url = os.getenv("HTTPS_PROXY") or os.getenv("https_proxy")
        return cls(
            timeout=timeout,
            host=os.getenv("BEVELNET_HOST", cls.host) or cls.host,
            connect_timeout=_optional_float_env("BEVELNET_CONNECT_TIMEOUT", cls.connect_timeout),
            proxy=ProxyConfig.from_url(proxy_url),
        )


def load_channel_settings() -> ChannelSettings:
    """Load channel settings from environment with sensible defaults."""
    return ChannelSettings.from_env()
