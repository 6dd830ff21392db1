"""Ammo-change candidates produced by discovery and upgraded by confirmation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import CandidateKind, RecordKind

if TYPE_CHECKING:
    from .identity import FormKey


_MODIFICATION_LIKE_RECORD_KINDS = frozenset(
    {
        RecordKind.OBJECT_MODIFICATION.casefold(),
        RecordKind.CONSTRUCTIBLE_OBJECT.casefold(),
    }
)


@dataclass(slots=True, kw_only=True)
class Candidate:
    """A record that may change the ammunition of a weapon.

    Providers fill the discovery fields once. Confirmers only write
    ``confirmed``/``confirm_reason`` and the ammo fields, and may fill
    ``base_weapon`` when discovery could not.
    """

    kind: CandidateKind
    form_key: FormKey
    record_kind: str = ""
    editor_id: str = ""
    base_weapon: FormKey | None = None
    base_weapon_editor_id: str = ""
    candidate_ammo: FormKey | None = None
    candidate_ammo_name: str = ""
    source_plugin: str = ""
    notes: str = ""
    suggested_target: str = ""
    confirmed: bool = False
    confirm_reason: str = ""

    def confirm(
        self,
        *,
        reason: str,
        ammo: FormKey,
        ammo_name: str = "",
    ) -> None:
        self.candidate_ammo = ammo
        self.candidate_ammo_name = ammo_name
        self.confirmed = True
        self.confirm_reason = reason

    @property
    def is_modification_like(self) -> bool:
        """Whether attach-point evidence can apply to this candidate."""

        if self.kind is CandidateKind.REFERENCE:
            return self.record_kind.casefold() in _MODIFICATION_LIKE_RECORD_KINDS
        return self.kind in (
            CandidateKind.MODIFICATION,
            CandidateKind.CONSTRUCTED_OBJECT,
            CandidateKind.CREATED_OBJECT,
        )
