"""Shared logging helpers for revtrack."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse format on stderr.

    Standard output is reserved for the payload each command prints, so log
    records never go there. Pass ``force=True`` to reconfigure during tests or
    when ``--verbose`` raises the level after startup.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
