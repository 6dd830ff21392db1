"""Generic reverse-reference scan over every exposed collection.

Any record that links to a known weapon, directly or as an element of a
sequence property, becomes a ``REFERENCE`` candidate for that weapon. The
record's other direct links are then scanned for a provisional ammunition
guess: the first link that is not the weapon itself wins, even when several
unrelated links are present.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.model import Candidate, CandidateKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ammolink.domain.model import FormKey
    from ammolink.domain.references import PropertyReference

    from .context import ExtractionContext

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReferenceScanCandidateProvider:
    name: str = "reference-scan"

    def provide(self, context: ExtractionContext) -> list[Candidate]:
        context.report("Running reverse-reference scan")
        results: list[Candidate] = []
        try:
            collections = tuple(context.environment.collection_names())
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            context.log_dedup.log("collection-list", "Could not list collections", exc=exc)
            return results

        for collection in collections:
            context.cancellation.checkpoint(f"reference-scan:{collection}")
            results.extend(self._scan_collection(collection, context))

        log.info("Reverse-reference scan found %d candidates", len(results))
        context.report(f"Reverse-reference scan found {len(results)} candidates")
        return results

    def _scan_collection(self, collection: str, context: ExtractionContext) -> list[Candidate]:
        found: list[Candidate] = []
        scanned = 0
        for record in context.reader.records(collection):
            if scanned % context.config.index_checkpoint_interval == 0:
                context.cancellation.checkpoint(f"reference-scan:{collection}")
            scanned += 1
            source = context.reader.identity_of(record)
            if source is None or context.is_excluded(source.plugin):
                continue
            found.extend(self._scan_record(record, source, collection, context))

        log.debug("Reverse-scan %s: %d records processed", collection, scanned)
        return found

    def _scan_record(
        self,
        record: object,
        source: FormKey,
        collection: str,
        context: ExtractionContext,
    ) -> list[Candidate]:
        references = tuple(
            context.reader.references(record, expand_sequences=True, weapon_keys=context.weapon_keys)
        )
        hits: list[Candidate] = []
        hit_properties: set[str] = set()
        for reference in references:
            if reference.form_key not in context.weapon_keys:
                continue
            if reference.property_name in hit_properties:
                continue
            hit_properties.add(reference.property_name)
            hits.append(self._candidate(record, source, collection, reference, references, context))
        return hits

    @staticmethod
    def _candidate(
        record: object,
        source: FormKey,
        collection: str,
        weapon_reference: PropertyReference,
        references: Sequence[PropertyReference],
        context: ExtractionContext,
    ) -> Candidate:
        reader = context.reader
        weapon_key = weapon_reference.form_key
        ammo = _first_other_link(references, weapon_reference.property_name, weapon_key)

        enumerable_note = " (enumerable)" if weapon_reference.from_sequence else ""
        notes = f"Reference found in {collection}.{weapon_reference.property_name}{enumerable_note} -> {weapon_key}"
        if ammo is not None:
            notes += f";DetectedAmmo={ammo}"

        return Candidate(
            kind=CandidateKind.REFERENCE,
            form_key=source,
            record_kind=collection,
            editor_id=reader.editor_id_of(record),
            base_weapon=weapon_key,
            base_weapon_editor_id=reader.editor_id_of(context.weapons_by_key.get(weapon_key)),
            candidate_ammo=ammo,
            source_plugin=source.plugin,
            notes=notes,
            suggested_target="Reference",
        )


def _first_other_link(
    references: Sequence[PropertyReference],
    weapon_property: str,
    weapon_key: FormKey,
) -> FormKey | None:
    for reference in references:
        if reference.from_sequence or reference.property_name == weapon_property:
            continue
        if reference.form_key != weapon_key:
            return reference.form_key
    return None
