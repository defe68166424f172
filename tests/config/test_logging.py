from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from resdepot.config import configure_logging
from resdepot.config.logging import TRANSPORT_LOGGERS

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def restore_transport_levels() -> Iterator[None]:
    previous = {name: logging.getLogger(name).level for name in TRANSPORT_LOGGERS}
    yield
    for name, level in previous.items():
        logging.getLogger(name).setLevel(level)


def test_transport_loggers_are_quiet_at_info() -> None:
    configure_logging(level=logging.INFO)

    for name in TRANSPORT_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_transport_loggers_follow_debug() -> None:
    configure_logging(level=logging.DEBUG)

    for name in TRANSPORT_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG
