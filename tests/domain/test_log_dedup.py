from __future__ import annotations

import logging

import pytest

from ammolink.domain.log_dedup import LogDeduplicator

LOGGER_NAME = "ammolink.tests.dedup"


def test_messages_past_threshold_are_counted_not_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    dedup = LogDeduplicator(logging.getLogger(LOGGER_NAME), threshold=2)

    emitted = [dedup.log("property-read", "failure %d", n) for n in range(5)]

    assert emitted == [True, True, False, False, False]
    assert "failure 0" in caplog.text
    assert "failure 2" not in caplog.text
    assert "Further 'property-read' messages suppressed" in caplog.text
    assert dedup.count("property-read") == 5
    assert dedup.suppressed() == {"property-read": 3}


def test_message_classes_have_separate_budgets() -> None:
    dedup = LogDeduplicator(logging.getLogger(LOGGER_NAME), threshold=1)

    dedup.log("identity", "a")
    dedup.log("identity", "b")

    assert dedup.log("editor-id", "c")
    assert dedup.suppressed() == {"identity": 1}


def test_summary_reports_suppressed_counts(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    dedup = LogDeduplicator(logging.getLogger(LOGGER_NAME), threshold=1)
    for _ in range(4):
        dedup.log("detector", "boom", exc=RuntimeError("boom"))

    dedup.summary()

    assert "Suppressed 3 further 'detector' messages" in caplog.text
