from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

import pytest

from ammolink.config import ConfigurationError, configure_logging, resolve_log_level

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize(
    ("level", "expected"),
    [(logging.WARNING, logging.WARNING), ("debug", logging.DEBUG), (" 15 ", 15)],
)
def test_resolve_explicit_levels(level: int | str, expected: int) -> None:
    assert resolve_log_level(level) == expected


def test_resolve_level_from_environment() -> None:
    assert resolve_log_level(environ={"AMMOLINK_LOG_LEVEL": "error"}) == logging.ERROR
    assert resolve_log_level(environ={}) == logging.INFO


def test_unknown_level_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError) as exc:
        resolve_log_level("chatty")

    assert exc.value.setting == "AMMOLINK_LOG_LEVEL"


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_writes_to_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"

    configure_logging(level="DEBUG", log_file=log_file, force=True)
    logging.getLogger("ammolink.tests").debug("indexed %d records", 3)
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert logging.getLogger().level == logging.DEBUG
    assert "DEBUG [ammolink.tests] indexed 3 records" in log_file.read_text(encoding="utf-8")
