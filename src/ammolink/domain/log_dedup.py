"""Run-scoped log deduplication.

Scanning tens of thousands of records tends to hit the same access failure
over and over. A :class:`LogDeduplicator` lives for one run and logs each
message class only up to ``threshold`` times; later occurrences are counted
and reported once by :meth:`summary`.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field


@dataclass(slots=True)
class LogDeduplicator:
    logger: logging.Logger
    threshold: int = 5
    level: int = logging.DEBUG
    _seen: Counter[str] = field(default_factory=Counter[str], repr=False)

    def log(
        self,
        message_class: str,
        msg: str,
        *args: object,
        exc: BaseException | None = None,
    ) -> bool:
        """Log ``msg`` unless ``message_class`` is over its budget.

        Returns ``True`` when the message was emitted.
        """

        self._seen[message_class] += 1
        count = self._seen[message_class]
        if count > self.threshold:
            return False
        self.logger.log(self.level, msg, *args, exc_info=exc)
        if count == self.threshold:
            self.logger.log(
                self.level,
                "Further '%s' messages suppressed for this run",
                message_class,
            )
        return True

    def count(self, message_class: str) -> int:
        return self._seen[message_class]

    def suppressed(self) -> dict[str, int]:
        return {
            message_class: count - self.threshold
            for message_class, count in self._seen.items()
            if count > self.threshold
        }

    def summary(self) -> None:
        for message_class, dropped in sorted(self.suppressed().items()):
            self.logger.info("Suppressed %d further '%s' messages", dropped, message_class)
