"""Confirm modifications through weapon attach points.

A modification declares the attach point it plugs into; weapons list the
attach points they expose in ``AttachParentSlots``. A modification whose
attach point some weapon exposes, and which also links to ammunition, is
taken to change that weapon's ammunition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Final

from ammolink.domain.errors import OperationCancelledError
from ammolink.domain.model import RecordKind
from ammolink.domain.shapes import is_ammo_record

from .context import ConfirmationReport

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ammolink.domain.model import Candidate, FormKey
    from ammolink.domain.references import PropertyReference

    from .context import ConfirmationContext

log = logging.getLogger(__name__)

RESOLUTION_ORDER: Final[tuple[str, ...]] = (
    RecordKind.OBJECT_MODIFICATION,
    RecordKind.CONSTRUCTIBLE_OBJECT,
    RecordKind.WEAPON,
    RecordKind.AMMO,
)
ATTACH_POINT_PROPERTY = "AttachPoint"
ATTACH_PARENT_SLOTS_PROPERTY = "AttachParentSlots"
CREATED_OBJECT_PROPERTY = "CreatedObject"

type SlotMap = dict[FormKey, list[FormKey]]


@dataclass(slots=True)
class AttachPointDiagnostics:
    """Per-stage counters for one attach-point pass."""

    total_candidates: int = 0
    skipped: int = 0
    resolved: int = 0
    resolution_failed: int = 0
    missing_attach_point: int = 0
    attach_point_matched: int = 0
    base_weapon_filled: int = 0
    ammo_reference_detected: int = 0
    confirmed: int = 0

    def log_summary(self, logger: logging.Logger) -> None:
        logger.info(
            "AttachPointDiagnostics: %s",
            ", ".join(f"{item.name}={getattr(self, item.name)}" for item in fields(self)),
        )


@dataclass(slots=True)
class AttachPointConfirmer:
    name: str = "attach-point"

    def confirm(
        self, candidates: Sequence[Candidate], context: ConfirmationContext
    ) -> ConfirmationReport:
        report = ConfirmationReport(self.name)
        diagnostics = AttachPointDiagnostics(total_candidates=len(candidates))
        slot_map: SlotMap | None = None

        for candidate in candidates:
            context.cancellation.checkpoint("attach-point:candidate", partial=report)
            if candidate.confirmed or not candidate.is_modification_like:
                report.skipped += 1
                diagnostics.skipped += 1
                continue
            report.examined += 1

            modification = self._resolve_modification(candidate.form_key, context)
            if modification is None:
                diagnostics.resolution_failed += 1
                continue
            diagnostics.resolved += 1

            attach_point = context.reader.read_link(modification, ATTACH_POINT_PROPERTY)
            if attach_point is None:
                diagnostics.missing_attach_point += 1
                continue

            if slot_map is None:
                slot_map = build_slot_map(context)
            weapons = slot_map.get(attach_point.form_key)
            if not weapons:
                continue
            diagnostics.attach_point_matched += 1
            if candidate.base_weapon is None:
                candidate.base_weapon = weapons[0]
                candidate.base_weapon_editor_id = context.reader.editor_id_of(
                    context.weapons_by_key.get(weapons[0])
                )
                diagnostics.base_weapon_filled += 1

            ammo = self._ammo_reference(modification, attach_point.form_key, context)
            if ammo is None:
                continue
            diagnostics.ammo_reference_detected += 1
            candidate.confirm(
                reason=f"AttachPointMatch+Ammo ({attach_point.form_key}) via {ammo.property_name}",
                ammo=ammo.form_key,
                ammo_name=context.ammo_name(ammo.form_key),
            )
            report.confirmed.append(candidate)
            diagnostics.confirmed += 1

        diagnostics.log_summary(log)
        return report

    def _resolve_modification(self, form_key: FormKey, context: ConfirmationContext) -> object | None:
        resolved = _resolve(form_key, RESOLUTION_ORDER, context)
        if resolved is None:
            return None
        if context.reader.record_kind_of(resolved).casefold() != RecordKind.CONSTRUCTIBLE_OBJECT.casefold():
            return resolved
        created = context.reader.read_link(resolved, CREATED_OBJECT_PROPERTY)
        if created is None:
            return None
        return _resolve(created.form_key, (RecordKind.OBJECT_MODIFICATION,), context)

    @staticmethod
    def _ammo_reference(
        modification: object,
        attach_point: FormKey,
        context: ConfirmationContext,
    ) -> PropertyReference | None:
        for reference in context.reader.references(modification, expand_sequences=True):
            if reference.form_key == attach_point:
                continue
            if reference.form_key in context.ammo_by_key:
                return reference
            if is_ammo_record(_resolve(reference.form_key, None, context)):
                return reference
        return None


def build_slot_map(context: ConfirmationContext) -> SlotMap:
    """Attach point -> weapons exposing it, in weapon cache order."""

    slot_map: SlotMap = {}
    for weapon in context.weapons:
        weapon_key = context.reader.identity_of(weapon)
        if weapon_key is None:
            continue
        for reference in context.reader.references(weapon, expand_sequences=True):
            if reference.property_name != ATTACH_PARENT_SLOTS_PROPERTY:
                continue
            holders = slot_map.setdefault(reference.form_key, [])
            if weapon_key not in holders:
                holders.append(weapon_key)
    return slot_map


def _resolve(
    form_key: FormKey,
    kinds: Sequence[str] | None,
    context: ConfirmationContext,
) -> object | None:
    resolver = context.resolver
    if resolver is None:
        return None
    attempts: Sequence[Sequence[str] | None] = [(kind,) for kind in kinds] if kinds else [None]
    for attempt in attempts:
        try:
            resolved = resolver.resolve(form_key, kinds=attempt)
        except OperationCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            context.log_dedup.log("resolve", "Could not resolve %s as %s", form_key, attempt, exc=exc)
            continue
        if resolved is not None:
            return resolved
    return None
