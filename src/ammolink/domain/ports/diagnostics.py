"""Port for diagnostic side outputs (markers, CSV reports)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ammolink.domain.model import Candidate


class DiagnosticWriter(Protocol):
    """Fire-and-forget sink; failures must never affect the pipeline."""

    def write_marker(self, stage: str, detail: str = "") -> None: ...

    def write_results(self, candidates: Sequence[Candidate]) -> None: ...

    def write_zero_reference_report(self, candidates: Sequence[Candidate]) -> None: ...


class NullDiagnosticWriter:
    def write_marker(self, stage: str, detail: str = "") -> None:
        _ = (stage, detail)

    def write_results(self, candidates: Sequence[Candidate]) -> None:
        _ = candidates

    def write_zero_reference_report(self, candidates: Sequence[Candidate]) -> None:
        _ = candidates
