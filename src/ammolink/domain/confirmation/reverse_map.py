"""Confirm candidates through records that reference their base weapon."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.model import FormKey

from .context import ConfirmationReport

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ammolink.domain.model import Candidate
    from ammolink.domain.reverse_index import ReferenceEntry

    from .context import ConfirmationContext

log = logging.getLogger(__name__)

AMMO_PROPERTY = "Ammo"
PROPERTY_SCAN_REASON = "property-scan fallback"


@dataclass(frozen=True, slots=True)
class _Evidence:
    ammo: FormKey
    reason: str


@dataclass(slots=True)
class ReverseMapConfirmer:
    """First confirmation pass.

    Candidates are grouped by base weapon so the index is walked once per
    weapon. For each entry the detector gets the first say; when it reports
    nothing, the entry's own links are checked against the ammunition map.
    The first entry that yields evidence confirms the whole group.
    """

    name: str = "reverse-map"

    def confirm(
        self, candidates: Sequence[Candidate], context: ConfirmationContext
    ) -> ConfirmationReport:
        report = ConfirmationReport(self.name)
        groups: dict[FormKey, list[Candidate]] = {}
        for candidate in candidates:
            if candidate.confirmed or candidate.base_weapon is None:
                report.skipped += 1
                continue
            groups.setdefault(candidate.base_weapon, []).append(candidate)

        for base_weapon, pending in groups.items():
            context.cancellation.checkpoint("reverse-map:group", partial=report)
            report.examined += len(pending)
            entries = context.reverse_index.lookup(base_weapon)
            if not entries:
                continue
            evidence = self._find_evidence(base_weapon, entries, context, report)
            if evidence is None:
                continue
            for candidate in pending:
                candidate.confirm(
                    reason=evidence.reason,
                    ammo=evidence.ammo,
                    ammo_name=context.ammo_name(evidence.ammo),
                )
                report.confirmed.append(candidate)

        log.info(
            "Reverse-map confirmation: %d confirmed of %d examined (%d skipped)",
            report.confirmed_count,
            report.examined,
            report.skipped,
        )
        return report

    def _find_evidence(
        self,
        base_weapon: FormKey,
        entries: Sequence[ReferenceEntry],
        context: ConfirmationContext,
        report: ConfirmationReport,
    ) -> _Evidence | None:
        original_ammo = self._original_ammo(base_weapon, context)
        interval = context.config.group_checkpoint_interval
        for position, entry in enumerate(entries):
            if position and position % interval == 0:
                context.cancellation.checkpoint("reverse-map:entries", partial=report)
            if entry.source.plugin in context.excluded_plugins:
                continue
            evidence = self._detector_evidence(entry, original_ammo, context)
            if evidence is None:
                evidence = self._property_scan_evidence(entry, base_weapon, context)
            if evidence is not None:
                return evidence
        return None

    @staticmethod
    def _original_ammo(base_weapon: FormKey, context: ConfirmationContext) -> object | None:
        link = context.reader.read_link(context.weapons_by_key.get(base_weapon), AMMO_PROPERTY)
        return link.value if link is not None else None

    @staticmethod
    def _detector_evidence(
        entry: ReferenceEntry,
        original_ammo: object | None,
        context: ConfirmationContext,
    ) -> _Evidence | None:
        detector = context.detector
        if detector is None:
            return None
        try:
            result = detector.detect(entry.record, original_ammo)
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            context.log_dedup.log(
                "detector", "Detector %s failed on %s", detector.name, entry.source, exc=exc
            )
            return None
        if not result.changes_ammo or result.new_ammo is None:
            return None
        new_ammo = result.new_ammo
        if not isinstance(new_ammo, FormKey):
            new_ammo = context.reader.identity_of(new_ammo)
        if new_ammo is None or not new_ammo.is_valid:
            return None
        return _Evidence(new_ammo, f"Detector {detector.name} reported change")

    @staticmethod
    def _property_scan_evidence(
        entry: ReferenceEntry,
        base_weapon: FormKey,
        context: ConfirmationContext,
    ) -> _Evidence | None:
        for reference in context.reader.references(entry.record):
            if reference.form_key == base_weapon:
                continue
            if reference.form_key in context.ammo_by_key:
                return _Evidence(reference.form_key, PROPERTY_SCAN_REASON)
        return None
