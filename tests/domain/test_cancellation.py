from __future__ import annotations

import threading

import pytest

from ammolink.domain import CancellationToken, OperationCancelledError


def test_checkpoint_passes_until_cancelled() -> None:
    token = CancellationToken()

    token.checkpoint("first")
    token.cancel()

    assert token.is_cancelled
    with pytest.raises(OperationCancelledError) as excinfo:
        token.checkpoint("second", partial=["done"])

    assert excinfo.value.boundary == "second"
    assert excinfo.value.partial == ["done"]
    assert "second" in str(excinfo.value)


def test_cancelled_factory() -> None:
    assert CancellationToken.cancelled().is_cancelled
    assert not CancellationToken().is_cancelled


def test_cancel_from_another_thread() -> None:
    token = CancellationToken()
    worker = threading.Thread(target=token.cancel)

    worker.start()
    worker.join()

    with pytest.raises(OperationCancelledError):
        token.checkpoint("after-thread")
