# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for bevelnet."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("BEVELNET_LOG_LEVEL", "WARNING").upper()

# httpx logs every request line at INFO.
TRANSPORT_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str | None = None) -> None:
    """
    Configure standard logging for CLI use.

    Transport loggers stay at WARNING unless DEBUG is requested, so ``--log-level
    INFO`` shows channel connect/close events without one line per HTTP request.
    """
    effective_level = getattr(logging, (level or DEFAULT_LOG_LEVEL).upper(), logging.WARNING)
    logging.basicConfig(
        level=effective_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    transport_level = effective_level if effective_level <= logging.DEBUG else max(effective_level, logging.WARNING)
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


__all__ = ["setup_logging"]
