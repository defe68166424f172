"""Logging setup for the resdepot command line."""

from __future__ import annotations

import logging
from typing import Final

TRANSPORT_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for terminal output.

    The HTTP libraries log every request at INFO. They stay at WARNING unless
    ``level`` asks for DEBUG output. Pass ``force=True`` to replace handlers
    installed earlier.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    transport_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
