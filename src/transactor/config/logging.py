"""Shared logging helpers for transactor."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once for CLI use.

    Wraps ``logging.basicConfig`` with an INFO default and a terse format. Pass
    ``force=True`` to replace handlers installed earlier (tests, embedding apps).
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
