# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""bevelnet CLI."""

from __future__ import annotations

import argparse
import sys

from ..channels import CommandChannel, FramedSocketChannel
from ..config import ChannelSettings, load_channel_settings
from ..errors import ChannelError, categorize_exception, error_category_to_reason
from ..http import create_default_web_client
from ..log import setup_logging

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_UNREACHABLE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Talk to a co-located service over its local REST API or framed socket"
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: BEVELNET_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    command = subparsers.add_parser("command", help="POST a message to /api/command")
    command.add_argument("--port", required=True, help="Port of the local REST API")
    command.add_argument("message", help="Message body to send")

    alive = subparsers.add_parser("alive", help="Probe /api/isAlive")
    alive.add_argument("--port", required=True, help="Port of the local REST API")

    sock = subparsers.add_parser("socket", help="Send one framed message over the local socket")
    sock.add_argument("--port", required=True, type=int, help="Port of the local socket server")
    sock.add_argument("message", help="Single-line payload to send")
    sock.add_argument(
        "--no-response",
        action="store_true",
        help="Do not wait for the one-line reply",
    )
    return parser


def _run_command(args: argparse.Namespace, settings: ChannelSettings) -> int:
    web_client = create_default_web_client(settings)
    try:
        with CommandChannel(web_client, args.port, host=settings.host) as channel:
            response = channel.send(args.message)
    finally:
        web_client.close()
    print(response)
    return EXIT_OK if response else EXIT_FAILURE


def _run_alive(args: argparse.Namespace, settings: ChannelSettings) -> int:
    web_client = create_default_web_client(settings)
    try:
        alive = CommandChannel(web_client, args.port, host=settings.host).is_alive()
    finally:
        web_client.close()
    print("alive" if alive else "not alive")
    return EXIT_OK if alive else EXIT_FAILURE


def _run_socket(args: argparse.Namespace, settings: ChannelSettings) -> int:
    with FramedSocketChannel(args.port, settings.host, connect_timeout=settings.connect_timeout) as channel:
        if not channel.is_connected():
            print(f"Could not connect to {settings.host}:{args.port}", file=sys.stderr)
            return EXIT_UNREACHABLE
        try:
            if args.no_response:
                channel.send_without_response(args.message)
                return EXIT_OK
            print(channel.send(args.message))
        except ChannelError as exc:
            print(f"{error_category_to_reason(categorize_exception(exc))}: {exc}", file=sys.stderr)
            return EXIT_FAILURE
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings = load_channel_settings()

    if args.command == "command":
        return _run_command(args, settings)
    if args.command == "alive":
        return _run_alive(args, settings)
    return _run_socket(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
