"""Lightweight record shape checks.

Used where a resolved record is not in any cached map and the core has to
guess whether it is ammunition. Checks run in priority order: declared
interface or class names, then the record signature, then a class-name
substring.
"""

from __future__ import annotations

from typing import Final

_AMMO_TYPE_NAMES: Final[frozenset[str]] = frozenset(
    {"iammunitiongetter", "iammogetter", "ammunition", "ammo", "ammorecord"}
)
_PROJECTILE_TYPE_NAMES: Final[frozenset[str]] = frozenset(
    {"iprojectilegetter", "projectile", "projectilerecord"}
)
_AMMO_SIGNATURES: Final[frozenset[str]] = frozenset({"AMMO", "PROJ"})
_NAME_HINTS: Final[tuple[str, ...]] = ("ammo", "ammunition", "projectile")


def _type_names(record: object) -> set[str]:
    return {cls.__name__.casefold() for cls in type(record).__mro__}


def _signature(record: object) -> str:
    for attribute in ("signature", "record_type"):
        value = getattr(record, attribute, None)
        if isinstance(value, str) and value:
            return value.strip().upper()
    return ""


def is_projectile_record(record: object) -> bool:
    if record is None:
        return False
    if _type_names(record) & _PROJECTILE_TYPE_NAMES:
        return True
    return _signature(record) == "PROJ"


def is_ammo_record(record: object) -> bool:
    """Whether ``record`` looks like ammunition (or its projectile)."""

    if record is None:
        return False
    names = _type_names(record)
    if names & (_AMMO_TYPE_NAMES | _PROJECTILE_TYPE_NAMES):
        return True
    if _signature(record) in _AMMO_SIGNATURES:
        return True
    class_name = type(record).__name__.casefold()
    return any(hint in class_name for hint in _NAME_HINTS)
