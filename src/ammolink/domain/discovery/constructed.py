"""Candidates from crafting recipes that create weapons."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ammolink.domain.model import Candidate, CandidateKind, RecordKind

if TYPE_CHECKING:
    from ammolink.domain.model import FormKey

    from .context import ExtractionContext

log = logging.getLogger(__name__)

CREATED_OBJECT_PROPERTY = "CreatedObject"
AMMO_PROPERTY = "Ammo"


@dataclass(slots=True)
class ConstructedObjectCandidateProvider:
    """Emit one candidate per constructible record that creates a known weapon."""

    name: str = "constructed-object"

    def provide(self, context: ExtractionContext) -> list[Candidate]:
        context.report("Extracting constructible object candidates")
        results: list[Candidate] = []
        records = context.reader.records(RecordKind.CONSTRUCTIBLE_OBJECT)
        for position, record in enumerate(records):
            if position % context.config.index_checkpoint_interval == 0:
                context.cancellation.checkpoint("constructed-object-scan")
            candidate = self._candidate_for(record, context)
            if candidate is not None:
                results.append(candidate)

        log.info("Extracted %d constructible object candidates", len(results))
        return results

    def _candidate_for(self, record: object, context: ExtractionContext) -> Candidate | None:
        reader = context.reader
        source = reader.identity_of(record)
        if source is None or context.is_excluded(source.plugin):
            return None

        created = reader.read_link(record, CREATED_OBJECT_PROPERTY)
        if created is None or created.form_key not in context.weapon_keys:
            return None

        weapon_key = created.form_key
        weapon = context.weapons_by_key.get(weapon_key)
        ammo = self._weapon_ammo(weapon, context)
        return Candidate(
            kind=CandidateKind.CREATED_OBJECT,
            form_key=weapon_key,
            record_kind=RecordKind.CONSTRUCTIBLE_OBJECT,
            editor_id=reader.editor_id_of(record),
            base_weapon=weapon_key,
            base_weapon_editor_id=reader.editor_id_of(weapon),
            candidate_ammo=ammo,
            candidate_ammo_name=reader.editor_id_of(context.ammo_by_key.get(ammo)) if ammo else "",
            source_plugin=source.plugin,
            notes=f"COBJ source: {source.plugin}:{weapon_key.form_id:08X}",
            suggested_target="CreatedWeapon",
        )

    @staticmethod
    def _weapon_ammo(weapon: object | None, context: ExtractionContext) -> FormKey | None:
        link = context.reader.read_link(weapon, AMMO_PROPERTY)
        return link.form_key if link is not None else None
