# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON encode/decode helpers for channel payloads."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from .errors import ResponseFormatError


def _to_jsonable(message: Any) -> Any:
    if hasattr(message, "to_dict") and callable(message.to_dict):
        return message.to_dict()
    if dataclasses.is_dataclass(message) and not isinstance(message, type):
        return dataclasses.asdict(message)
    return message


def encode_message(message: Any) -> str:
    """
    Encode an arbitrary message to its compact JSON wire form.

    json.dumps escapes control characters, so the result never contains a raw
    newline and is safe to put on a single framed line.
    """
    return json.dumps(_to_jsonable(message), separators=(",", ":"), default=str)


def decode_bool(text: str) -> bool:
    """Decode a JSON boolean body; anything else raises ValueError."""
    value = json.loads(text)
    if not isinstance(value, bool):
        raise ValueError(f"Expected a JSON boolean, got {type(value).__name__}")
    return value


def extract_message_content(text: str) -> str:
    """Return ``choices[0].message.content`` from a chat-completion style body."""
    try:
        payload = json.loads(text)
        content = payload["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise ResponseFormatError(f"Response does not contain choices[0].message.content: {exc}") from exc
    if not isinstance(content, str):
        raise ResponseFormatError(f"choices[0].message.content is {type(content).__name__}, expected str")
    return content


__all__ = ["decode_bool", "encode_message", "extract_message_content"]
