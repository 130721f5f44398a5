"""Logging setup for the command line."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_HTTP_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    ``force=True`` replaces handlers installed by an earlier call; the CLI uses it
    once the profile's level is known. Per-request logging of the HTTP libraries
    is only shown at DEBUG.
    """

    logging.basicConfig(level=level, format=_FORMAT, datefmt="%H:%M:%S", force=force)
    http_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)
