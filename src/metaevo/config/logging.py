"""Logging setup for entry points."""

from __future__ import annotations

import logging
import os

from .errors import InvalidConfigurationError


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def get_log_level(*, default: int = logging.INFO) -> int:
    """Level named by ``METAEVO_LOG_LEVEL`` (e.g. ``DEBUG``), or ``default``."""

    raw = os.getenv("METAEVO_LOG_LEVEL")
    if raw is None or not raw.strip():
        return default
    level = logging.getLevelNamesMapping().get(raw.strip().upper())
    if level is None:
        raise InvalidConfigurationError("METAEVO_LOG_LEVEL", raw, "a logging level name")
    return level
