# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""REST command channel for a co-located service."""

from __future__ import annotations

import logging
from typing import Any

from ..codec import decode_bool, encode_message
from ..config import DEFAULT_HOST
from ..http.client import WebClient

logger = logging.getLogger(__name__)


class CommandChannel:
    """
    Talks to ``http://{host}:{port}/api`` through a WebClient.

    ``send`` posts to ``/command`` and blocks for the reply text;
    ``send_without_response`` posts without waiting; ``is_alive`` probes
    ``/isAlive``. The WebClient is owned by the caller, so ``close`` leaves it
    open.
    """

    def __init__(self, web_client: WebClient, port: int | str, host: str = DEFAULT_HOST):
        self.web_client = web_client
        self.port = port
        self.base_url = f"http://{host}:{port}/api"

    @property
    def command_url(self) -> str:
        return f"{self.base_url}/command"

    @property
    def is_alive_url(self) -> str:
        return f"{self.base_url}/isAlive"

    def send(self, message: Any) -> str:
        """POST the message and return the response body ("" on failure)."""
        body = message if isinstance(message, str) else encode_message(message)
        return self.web_client.send_post_blocking(self.command_url, body)

    def send_without_response(self, message: str) -> None:
        response = self.web_client.send_post(self.command_url, message)
        # Deferred results are lazy; without a trigger the request is never sent.
        trigger = getattr(response, "trigger", None)
        if callable(trigger):
            trigger()

    def is_alive(self) -> bool:
        try:
            result = self.web_client.send_get_blocking(self.is_alive_url)
            if result == "":
                return False
            return decode_bool(result)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to check connection, most likely connection partner not running: %s", exc)
            return False

    def is_connected(self) -> bool:
        return self.is_alive()

    def close(self) -> None:
        return None

    def __enter__(self) -> CommandChannel:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
