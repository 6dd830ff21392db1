"""Logging setup for ammolink runs."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Final

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ENV_LOG_LEVEL: Final[str] = "AMMOLINK_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT: Final[str] = "%H:%M:%S"


def resolve_log_level(
    level: int | str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Turn a level name or number into a ``logging`` level.

    Without an explicit ``level`` the ``AMMOLINK_LOG_LEVEL`` variable is used,
    then INFO.
    """

    if level is None:
        source = os.environ if environ is None else environ
        level = source.get(ENV_LOG_LEVEL, "").strip() or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelNamesMapping().get(name)
    if resolved is None:
        raise ConfigurationError(f"Unknown log level: {level!r}", setting=ENV_LOG_LEVEL)
    return resolved


def configure_logging(
    *,
    level: int | str | None = None,
    log_file: Path | None = None,
    force: bool = False,
) -> None:
    """Initialise the root logger for a discovery run.

    Records always go to stderr; with ``log_file`` they are also appended to
    that file, whose directory is created on demand. Pass ``force=True`` to
    replace handlers installed by an earlier call.
    """

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=force,
    )
