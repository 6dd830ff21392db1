"""Cooperative cancellation with explicit checkpoints."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .errors import OperationCancelledError


@dataclass(slots=True)
class CancellationToken:
    """Shared cancellation flag.

    Long passes call :meth:`checkpoint` at well-defined boundaries (per
    candidate, per reverse-index group, every N records). The flag is a
    ``threading.Event`` so a controlling thread may cancel a running pass.
    """

    _event: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def cancelled(cls) -> CancellationToken:
        token = cls()
        token.cancel()
        return token

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def checkpoint(self, boundary: str, *, partial: object | None = None) -> None:
        if self._event.is_set():
            raise OperationCancelledError(boundary, partial=partial)
