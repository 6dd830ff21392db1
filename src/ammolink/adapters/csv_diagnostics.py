"""CSV and marker-file diagnostics.

Writes one marker file per pipeline stage, the full results table
(``weapon_omods_<stamp>.csv``) and a summary of candidates that never found
a base weapon (``zero_ref_summary_<stamp>.csv``). All files of one writer
share the same timestamp so a run's artifacts sort together.
"""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Final

from ammolink import __version__

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from ammolink.domain.model import Candidate, FormKey

log = logging.getLogger(__name__)

RESULT_COLUMNS: Final[tuple[str, ...]] = (
    "CandidateType",
    "BaseWeapon",
    "BaseEditorId",
    "CandidateFormKey",
    "CandidateEditorId",
    "CandidateAmmo",
    "CandidateAmmoName",
    "SourcePlugin",
    "Notes",
    "SuggestedTarget",
    "ConfirmedAmmoChange",
    "ConfirmReason",
)
ZERO_REFERENCE_COLUMNS: Final[tuple[str, ...]] = (
    "CandidateType",
    "SourcePlugin",
    "CandidateFormKey",
    "CandidateEditorId",
    "ConfirmReason",
)
STAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"


def _key(form_key: FormKey | None) -> str:
    return str(form_key) if form_key is not None else ""


def _candidate_type(candidate: Candidate) -> str:
    return candidate.record_kind or str(candidate.kind)


def result_row(candidate: Candidate) -> list[str]:
    return [
        _candidate_type(candidate),
        _key(candidate.base_weapon),
        candidate.base_weapon_editor_id,
        _key(candidate.form_key),
        candidate.editor_id,
        _key(candidate.candidate_ammo),
        candidate.candidate_ammo_name,
        candidate.source_plugin,
        candidate.notes,
        candidate.suggested_target,
        "true" if candidate.confirmed else "false",
        candidate.confirm_reason,
    ]


class CsvDiagnosticWriter:
    """``DiagnosticWriter`` that writes into an artifacts directory.

    Errors propagate; the pipeline treats every diagnostics call as
    fire-and-forget and logs failures itself.
    """

    def __init__(self, directory: Path, *, timestamp: datetime | None = None) -> None:
        self.directory = directory
        self.stamp = (timestamp or datetime.now()).strftime(STAMP_FORMAT)

    @property
    def results_path(self) -> Path:
        return self.directory / f"weapon_omods_{self.stamp}.csv"

    @property
    def zero_reference_path(self) -> Path:
        return self.directory / f"zero_ref_summary_{self.stamp}.csv"

    def marker_path(self, stage: str) -> Path:
        return self.directory / f"{stage.replace('-', '_')}_{self.stamp}.txt"

    def write_marker(self, stage: str, detail: str = "") -> None:
        path = self.marker_path(stage)
        self._ensure_directory()
        written = datetime.now().isoformat(timespec="seconds")
        lines = [f"{stage} at {written} (ammolink {__version__})"]
        if detail:
            lines.append(detail)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        log.debug("Wrote %s marker: %s", stage, path)

    def write_results(self, candidates: Sequence[Candidate]) -> None:
        self._write_csv(self.results_path, RESULT_COLUMNS, (result_row(c) for c in candidates))
        log.info("Wrote results CSV (%d rows): %s", len(candidates), self.results_path)

    def write_zero_reference_report(self, candidates: Sequence[Candidate]) -> None:
        zero = [c for c in candidates if not c.confirmed and c.base_weapon is None]
        if not zero:
            return
        rows = (
            [_candidate_type(c), c.source_plugin, _key(c.form_key), c.editor_id, c.confirm_reason]
            for c in zero
        )
        self._write_csv(self.zero_reference_path, ZERO_REFERENCE_COLUMNS, rows)
        log.info("Wrote zero-reference summary (%d rows): %s", len(zero), self.zero_reference_path)

    def _write_csv(self, path: Path, header: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
        self._ensure_directory()
        with path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle)
            writer.writerow(header)
            writer.writerows(rows)

    def _ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
