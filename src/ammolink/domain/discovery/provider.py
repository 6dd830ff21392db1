"""Provider contract for candidate discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ammolink.domain.model import Candidate

    from .context import ExtractionContext


class CandidateProvider(Protocol):
    """Contract implemented by each discovery strategy.

    Providers never raise for a single bad record; only cancellation escapes.
    """

    name: str

    def provide(self, context: ExtractionContext) -> list[Candidate]: ...
