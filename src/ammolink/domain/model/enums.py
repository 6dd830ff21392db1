"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CandidateKind(StrEnum):
    """How a candidate was discovered."""

    CREATED_OBJECT = "created_object"
    MODIFICATION = "modification"
    REFERENCE = "reference"
    CONSTRUCTED_OBJECT = "constructed_object"


class ReferenceKind(StrEnum):
    """Closed set of roles a link-valued property can play."""

    WEAPON = "weapon"
    AMMO = "ammo"
    ATTACH_POINT = "attach_point"
    OTHER = "other"


class RecordKind(StrEnum):
    """Collection names the core knows by name.

    Every other collection exposed by an environment is still scanned
    generically; these are only the kinds with dedicated handling.
    """

    WEAPON = "Weapon"
    AMMO = "Ammo"
    PROJECTILE = "Projectile"
    OBJECT_MODIFICATION = "ObjectModification"
    CONSTRUCTIBLE_OBJECT = "ConstructibleObject"
    KEYWORD = "Keyword"
