"""Root logger setup for the CLI and the API server."""

from __future__ import annotations

import logging

# Per-request INFO lines from the HTTP stack drown out reconciliation progress.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger with the catalogsync format.

    Below DEBUG the HTTP client libraries are capped at WARNING. ``force=True``
    replaces handlers installed earlier (tests, embedding servers).
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
