"""Port for pluggable ammunition change detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class DetectionResult:
    changes_ammo: bool
    new_ammo: object | None = None


NO_CHANGE = DetectionResult(changes_ammo=False)


@runtime_checkable
class AmmunitionChangeDetector(Protocol):
    """Decide whether a modification record swaps a weapon's ammunition.

    Concrete detectors know one record schema version; the core only relies on
    this contract.
    """

    name: str

    def detect(self, record: object, original_ammo: object | None) -> DetectionResult: ...
