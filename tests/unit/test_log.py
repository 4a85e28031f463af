# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

import pytest

from bevelnet.log import TRANSPORT_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_transport_levels():
    saved = {name: logging.getLogger(name).level for name in TRANSPORT_LOGGERS}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


@pytest.mark.parametrize(
    "level,expected",
    [
        ("INFO", logging.WARNING),
        ("warning", logging.WARNING),
        ("ERROR", logging.ERROR),
        ("DEBUG", logging.DEBUG),
        ("bogus", logging.WARNING),
    ],
)
def test_setup_logging_keeps_transport_loggers_quiet(level, expected):
    setup_logging(level)
    for name in TRANSPORT_LOGGERS:
        assert logging.getLogger(name).level == expected
